import logging

import gitrewind
import gitrewind.parameters

logging.basicConfig(level=logging.INFO)

model = gitrewind.load_activity("examples/octocat-2024.yaml")
params = gitrewind.compute_parameters(model)

logging.info(f"Tempo: {params.tempo.bpm} BPM, swing {params.tempo.swing:.2f}")
logging.info(f"Key: {params.music.key.root} {params.music.key.mode} ({params.music.mood})")
logging.info(f"Progression: {' '.join(chord.name() for chord in params.music.chord_progression)}")
logging.info(f"Art: {params.art.style}, {params.art.particle_count} particles")
logging.info(f"Share: {gitrewind.parameters.share_data(params)}")

composition = gitrewind.compose(params)
gitrewind.save_midi(composition, "octocat-2024.mid")

# Same render at a slower tempo, without touching the original record.
slow = gitrewind.parameters.apply_overrides(params, tempo=gitrewind.parameters.Tempo(bpm=72, swing=params.tempo.swing))
gitrewind.save_midi(gitrewind.compose(slow), "octocat-2024-slow.mid")

simulation = gitrewind.ForceSimulation(params.seed)
simulation.set_data(gitrewind.build_graph(model, params))
simulation.run()

for node_id, (x, y, z) in simulation.positions().items():
	logging.info(f"{node_id:>12}: ({x:7.1f}, {y:7.1f}, {z:7.1f})")
