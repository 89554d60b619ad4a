"""
gitrewind - a year of code, as music, color and a collaboration graph.

gitrewind turns a yearly activity summary (commits, languages,
collaborators, a month-by-month series) into a deterministic bundle of
creative parameters, then uses that bundle to compose a 90-second piece and
to lay out a 3D collaboration graph.

The pipeline:

- **Seed.** ``(username, year)`` hashes to a 32-bit seed.  Every random
  decision draws from a ``SeededRandom`` stream, so the same user and year
  always produce identical output.
- **Parameters.** ``compute_parameters()`` derives tempo (logarithmic in
  commits per day), key and mode, mood, a color palette from the top
  languages, per-language instruments, an art style and graph sizing.
- **Composition.** ``compose()`` schedules notes across five fixed
  sections - intro, verse (one slice per month), chorus, bridge, outro -
  totalling 90 seconds.  ``save_midi()`` renders the result to a MIDI file.
- **Layout.** ``build_graph()`` and ``ForceSimulation`` relax the user's
  collaboration star into a 3D layout with repulsion, springs, centering
  and damping.

Minimal example:

    ```python
    import gitrewind

    model = gitrewind.load_activity("octocat-2024.yaml")
    params = gitrewind.compute_parameters(model)
    composition = gitrewind.compose(params)
    gitrewind.save_midi(composition, "octocat-2024.mid")

    simulation = gitrewind.ForceSimulation(params.seed)
    simulation.set_data(gitrewind.build_graph(model, params))
    simulation.run()
    ```

Package-level exports: ``ActivityModel``, ``load_activity``,
``compute_parameters``, ``compose``, ``save_midi``, ``ForceSimulation``,
``build_graph``, ``SeededRandom``.
"""

import gitrewind.activity
import gitrewind.composer
import gitrewind.midi_export
import gitrewind.parameters
import gitrewind.seeded_random
import gitrewind.simulation


ActivityModel = gitrewind.activity.ActivityModel
load_activity = gitrewind.activity.load_activity
compute_parameters = gitrewind.parameters.compute_parameters
compose = gitrewind.composer.compose
save_midi = gitrewind.midi_export.save_midi
ForceSimulation = gitrewind.simulation.ForceSimulation
build_graph = gitrewind.simulation.build_graph
SeededRandom = gitrewind.seeded_random.SeededRandom
