import argparse
import json
import logging
import os
import sys
import typing

import yaml

import gitrewind.activity
import gitrewind.composer
import gitrewind.midi_export
import gitrewind.parameters
import gitrewind.simulation


logger = logging.getLogger("gitrewind")


def load_config (config_path: str = 'config.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def parse_args (argv: typing.Optional[typing.List[str]] = None) -> argparse.Namespace:

	parser = argparse.ArgumentParser(
		prog="gitrewind",
		description="Turn a yearly activity summary into parameters, a 90-second composition and a graph layout.",
	)
	parser.add_argument("activity", help="Activity model file (JSON or YAML)")
	parser.add_argument("--config", default="config.yaml", help="YAML configuration file (default: config.yaml)")
	parser.add_argument("--midi", metavar="FILE", help="Write the composition to a MIDI file")
	parser.add_argument("--layout", metavar="FILE", help="Write the settled graph layout to a JSON file")
	parser.add_argument("--ticks", type=int, help="Simulation ticks for the layout (overrides config)")
	parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

	return parser.parse_args(argv)


def layout_to_dict (simulation: gitrewind.simulation.ForceSimulation) -> typing.Dict[str, typing.Any]:

	"""Plain-data snapshot of the simulation for renderers."""

	return {
		"ticks": simulation.tick_count,
		"nodes": [
			{
				"id": node.id,
				"type": node.type,
				"label": node.label,
				"size": node.size,
				"color": node.color,
				"avatarUrl": node.avatar_url,
				"position": [node.x, node.y, node.z],
			}
			for node in simulation.nodes
		],
		"edges": [
			{"source": edge.source, "target": edge.target, "weight": edge.weight}
			for edge in simulation.edges
		],
	}


def run (args: argparse.Namespace) -> None:

	config = load_config(args.config)

	model = gitrewind.activity.load_activity(args.activity)
	params = gitrewind.parameters.compute_parameters(model)

	logger.info(
		f"{params.username} {params.year}: seed {params.seed}, {params.tempo.bpm} BPM, "
		f"{params.music.key.root} {params.music.key.mode}, {params.music.mood}, {params.art.style}"
	)

	composition = gitrewind.composer.compose(params)

	for section in composition.sections:
		logger.info(f"  {section.name:<7} {section.start_time:5.1f}s  {len(section.notes):4d} notes")

	if args.midi:
		ticks_per_beat = int(config.get('midi', {}).get('ticks_per_beat', gitrewind.midi_export.DEFAULT_TICKS_PER_BEAT))
		gitrewind.midi_export.save_midi(composition, args.midi, ticks_per_beat=ticks_per_beat)

	if args.layout:
		simulation_settings = dict(config.get('simulation', {}))
		ticks = simulation_settings.pop('ticks', gitrewind.simulation.INITIAL_TICKS)

		if args.ticks is not None:
			ticks = args.ticks

		simulation = gitrewind.simulation.ForceSimulation(
			params.seed,
			gitrewind.simulation.SimulationConfig.from_dict(simulation_settings),
		)
		simulation.set_data(gitrewind.simulation.build_graph(model, params))
		simulation.run(int(ticks))

		with open(args.layout, 'w') as f:
			json.dump(layout_to_dict(simulation), f, indent=2)

		logger.info(f"Saved layout ({len(simulation.nodes)} nodes) to {args.layout}")


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the gitrewind command line.
	"""

	args = parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	try:
		run(args)
	except (OSError, ValueError, yaml.YAMLError) as e:
		logger.error(f"{e}")
		return 1

	return 0


if __name__ == "__main__":
	sys.exit(main())
