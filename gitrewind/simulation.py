"""Force-directed 3D layout of the collaboration graph.

The physics is a set of pure functions over lists of :class:`SimulationNode`:
:func:`apply_repulsion`, :func:`apply_links`, :func:`apply_center` and
:func:`integrate`, composed by :func:`step` in that fixed order.  None of
them mutate their inputs, so a single step can be tested in isolation.

:class:`ForceSimulation` is the thin stateful wrapper a render loop drives:
it seeds initial positions, owns the current node list, and advances it one
:meth:`~ForceSimulation.tick` at a time.  Stopping and resuming ticks is
always safe.

:func:`build_graph` derives the graph itself from an activity model: a star
around the user, plus a few decorative cross-links.
"""

import dataclasses
import logging
import math
import typing

import gitrewind.activity
import gitrewind.color
import gitrewind.parameters
import gitrewind.seeded_random


logger = logging.getLogger(__name__)


INITIAL_TICKS = 100
SPAWN_CUBE_SIZE = 200.0

MAX_COLLABORATOR_NODES = 50
MAX_PLACEHOLDER_NODES = 25
CROSS_LINK_THRESHOLD = 0.7
CROSS_LINK_WEIGHT = 0.3


@dataclasses.dataclass(frozen=True)
class SimulationConfig:

	"""
	Force constants for :func:`step`.

	Attributes:
		center_force: Pull toward the origin per unit of offset (user node exempt).
		repulsion_force: Inverse-square repulsion strength.
		link_force: Spring stiffness, multiplied by each edge's weight.
		damping: Velocity multiplier applied every tick (0–1).
		min_distance: Repulsion only acts between nodes closer than this.
		rest_length: Spring length at which links exert no force.
	"""

	center_force: float = 0.01
	repulsion_force: float = 500.0
	link_force: float = 0.1
	damping: float = 0.9
	min_distance: float = 30.0
	rest_length: float = 50.0


	@classmethod
	def from_dict (cls, data: typing.Optional[typing.Mapping[str, typing.Any]]) -> "SimulationConfig":

		"""Merge a partial mapping (e.g. from a YAML config) onto the defaults."""

		if not data:
			return cls()

		known = {field.name for field in dataclasses.fields(cls)}
		unknown = sorted(set(data) - known)

		if unknown:
			raise ValueError(f"Unknown simulation setting(s): {unknown}. Available: {sorted(known)}")

		return cls(**{name: float(value) for name, value in data.items()})


@dataclasses.dataclass(frozen=True)
class GraphNode:

	id: str
	type: str
	label: str
	size: float
	color: str
	avatar_url: typing.Optional[str] = None
	x: typing.Optional[float] = None
	y: typing.Optional[float] = None
	z: typing.Optional[float] = None


@dataclasses.dataclass(frozen=True)
class SimulationNode (GraphNode):

	"""A graph node with a resolved position and a velocity."""

	x: float = 0.0
	y: float = 0.0
	z: float = 0.0
	vx: float = 0.0
	vy: float = 0.0
	vz: float = 0.0


@dataclasses.dataclass(frozen=True)
class GraphEdge:

	source: str
	target: str
	weight: float


@dataclasses.dataclass(frozen=True)
class GraphData:

	nodes: typing.Tuple[GraphNode, ...]
	edges: typing.Tuple[GraphEdge, ...]


Vector = typing.List[float]


def _accelerate (nodes: typing.Sequence[SimulationNode], deltas: typing.Sequence[Vector]) -> typing.List[SimulationNode]:

	"""Return copies of ``nodes`` with velocity deltas added."""

	return [
		dataclasses.replace(node, vx=node.vx + dvx, vy=node.vy + dvy, vz=node.vz + dvz)
		for node, (dvx, dvy, dvz) in zip(nodes, deltas)
	]


def _offset (a: SimulationNode, b: SimulationNode) -> typing.Tuple[float, float, float, float]:

	"""Vector from ``a`` to ``b`` and its length (1.0 when the nodes coincide)."""

	dx = b.x - a.x
	dy = b.y - a.y
	dz = b.z - a.z
	dist = math.sqrt(dx * dx + dy * dy + dz * dz) or 1.0

	return dx, dy, dz, dist


def apply_repulsion (nodes: typing.Sequence[SimulationNode], config: SimulationConfig) -> typing.List[SimulationNode]:

	"""Push apart every pair closer than ``min_distance`` with an inverse-square force.

	The force is capped at ``repulsion_force`` by flooring the distance at 1.
	"""

	deltas = [[0.0, 0.0, 0.0] for _ in nodes]

	for i in range(len(nodes)):
		for j in range(i + 1, len(nodes)):

			dx, dy, dz, dist = _offset(nodes[i], nodes[j])

			if dist >= config.min_distance:
				continue

			floored = max(dist, 1.0)
			force = config.repulsion_force / (floored * floored)
			fx = dx / dist * force
			fy = dy / dist * force
			fz = dz / dist * force

			deltas[i][0] -= fx
			deltas[i][1] -= fy
			deltas[i][2] -= fz
			deltas[j][0] += fx
			deltas[j][1] += fy
			deltas[j][2] += fz

	return _accelerate(nodes, deltas)


def apply_links (
	nodes: typing.Sequence[SimulationNode],
	edges: typing.Sequence[GraphEdge],
	config: SimulationConfig
) -> typing.List[SimulationNode]:

	"""Pull (or push) linked nodes toward ``rest_length`` with a Hooke's-law spring.

	Edges naming a missing node are ignored.
	"""

	index = {node.id: i for i, node in enumerate(nodes)}
	deltas = [[0.0, 0.0, 0.0] for _ in nodes]

	for edge in edges:

		if edge.source not in index or edge.target not in index:
			continue

		s = index[edge.source]
		t = index[edge.target]

		dx, dy, dz, dist = _offset(nodes[s], nodes[t])

		force = (dist - config.rest_length) * config.link_force * edge.weight
		fx = dx / dist * force
		fy = dy / dist * force
		fz = dz / dist * force

		deltas[s][0] += fx
		deltas[s][1] += fy
		deltas[s][2] += fz
		deltas[t][0] -= fx
		deltas[t][1] -= fy
		deltas[t][2] -= fz

	return _accelerate(nodes, deltas)


def apply_center (nodes: typing.Sequence[SimulationNode], config: SimulationConfig) -> typing.List[SimulationNode]:

	"""Pull every non-user node gently toward the origin."""

	deltas = [
		[0.0, 0.0, 0.0] if node.type == "user" else [
			-node.x * config.center_force,
			-node.y * config.center_force,
			-node.z * config.center_force,
		]
		for node in nodes
	]

	return _accelerate(nodes, deltas)


def integrate (nodes: typing.Sequence[SimulationNode], config: SimulationConfig) -> typing.List[SimulationNode]:

	"""Damp velocities, then move each node by its velocity."""

	result: typing.List[SimulationNode] = []

	for node in nodes:
		vx = node.vx * config.damping
		vy = node.vy * config.damping
		vz = node.vz * config.damping
		result.append(dataclasses.replace(node, x=node.x + vx, y=node.y + vy, z=node.z + vz, vx=vx, vy=vy, vz=vz))

	return result


def step (
	nodes: typing.Sequence[SimulationNode],
	edges: typing.Sequence[GraphEdge],
	config: SimulationConfig
) -> typing.List[SimulationNode]:

	"""Advance the layout by one tick: repulsion, links, centering, integration."""

	nodes = apply_repulsion(nodes, config)
	nodes = apply_links(nodes, edges, config)
	nodes = apply_center(nodes, config)

	return integrate(nodes, config)


class ForceSimulation:

	"""
	Stateful driver for :func:`step`.

	Example:
		```python
		simulation = ForceSimulation(params.seed)
		simulation.set_data(build_graph(model, params))
		simulation.run()            # initial layout

		while rendering:
			simulation.tick()       # continued settling, at the caller's cadence
			draw(simulation.nodes)
		```
	"""

	def __init__ (self, seed: int, config: typing.Optional[SimulationConfig] = None) -> None:

		self.config = config or SimulationConfig()
		self.rng = gitrewind.seeded_random.SeededRandom(seed)
		self.tick_count = 0

		self._nodes: typing.List[SimulationNode] = []
		self._edges: typing.List[GraphEdge] = []


	def set_data (self, data: GraphData) -> None:

		"""
		Load a graph and resolve initial positions.

		Nodes without explicit coordinates land at seeded random positions in
		a cube centred on the origin.  The user node is then placed exactly at
		the origin.
		"""

		def spawn (value: typing.Optional[float]) -> float:
			if value is not None:
				return float(value)
			return (self.rng.random() - 0.5) * SPAWN_CUBE_SIZE

		nodes: typing.List[SimulationNode] = []

		for node in data.nodes:
			nodes.append(SimulationNode(
				id=node.id,
				type=node.type,
				label=node.label,
				size=node.size,
				color=node.color,
				avatar_url=node.avatar_url,
				x=spawn(node.x),
				y=spawn(node.y),
				z=spawn(node.z),
			))

		self._nodes = [
			dataclasses.replace(node, x=0.0, y=0.0, z=0.0) if node.type == "user" else node
			for node in nodes
		]
		self._edges = list(data.edges)
		self.tick_count = 0

		logger.debug(f"Simulation loaded {len(self._nodes)} nodes, {len(self._edges)} edges")


	def tick (self) -> typing.List[SimulationNode]:

		"""Advance one step and return the new nodes."""

		self._nodes = step(self._nodes, self._edges, self.config)
		self.tick_count += 1

		return self._nodes


	def run (self, ticks: int = INITIAL_TICKS) -> typing.List[SimulationNode]:

		"""Advance ``ticks`` steps (100 by default, the initial layout)."""

		for _ in range(ticks):
			self.tick()

		return self._nodes


	@property
	def nodes (self) -> typing.List[SimulationNode]:

		return list(self._nodes)


	@property
	def edges (self) -> typing.List[GraphEdge]:

		return list(self._edges)


	def positions (self) -> typing.Dict[str, typing.Tuple[float, float, float]]:

		"""Map node id to its current ``(x, y, z)``."""

		return {node.id: (node.x, node.y, node.z) for node in self._nodes}


def build_graph (
	model: gitrewind.activity.ActivityModel,
	params: gitrewind.parameters.UnifiedParameters
) -> GraphData:

	"""Build the collaboration graph for a user.

	The user sits at the hub of a star whose spokes are weighted by node size.
	Up to 50 distinct collaborators are included; a year with none gets 5–25 seeded
	placeholder nodes (more for more intense years) tinted around the primary
	hue, so the picture is never empty.  Roughly 30% of non-user nodes also
	gain a decorative cross-link to another random non-user node.
	"""

	colors = params.colors
	primary_color = gitrewind.color.hsl_to_hex(colors.primary)

	nodes: typing.List[GraphNode] = [
		GraphNode(
			id=model.user.login,
			type="user",
			label=model.user.login,
			size=2.0,
			color=primary_color,
			avatar_url=model.user.avatar_url,
		)
	]

	collaborators = model.collaborators[:MAX_COLLABORATOR_NODES]
	secondary_color = gitrewind.color.hsl_to_hex(colors.secondary)
	seen_ids = {model.user.login}

	for collaborator in collaborators:

		# Node ids are unique; the first occurrence of a login wins.
		if collaborator.login in seen_ids:
			logger.debug(f"Skipping duplicate collaborator node {collaborator.login}")
			continue

		seen_ids.add(collaborator.login)
		nodes.append(GraphNode(
			id=collaborator.login,
			type="collaborator",
			label=collaborator.login,
			size=0.5 + min(collaborator.interactions / 10, 1.5),
			color=secondary_color,
			avatar_url=collaborator.avatar_url,
		))

	if len(nodes) == 1:

		placeholder_rng = gitrewind.seeded_random.SeededRandom(params.seed)
		count = min(math.ceil(params.intensity * 20) + 5, MAX_PLACEHOLDER_NODES)

		for i in range(count):
			hue = (colors.primary.h + placeholder_rng.random() * 60 - 30 + 360) % 360
			nodes.append(GraphNode(
				id=f"node-{i}",
				type="collaborator",
				label=f"Activity {i + 1}",
				size=0.3 + placeholder_rng.random() * 0.7,
				color=gitrewind.color.hsl_to_hex(gitrewind.color.HSL(h=int(hue), s=60, l=50)),
			))

	user = nodes[0]
	edges: typing.List[GraphEdge] = [
		GraphEdge(source=user.id, target=node.id, weight=node.size)
		for node in nodes[1:]
	]

	link_rng = gitrewind.seeded_random.SeededRandom(params.seed + 1)

	for i in range(1, len(nodes)):

		if link_rng.random() > CROSS_LINK_THRESHOLD:
			target = 1 + int(link_rng.random() * (len(nodes) - 1))

			if target != i:
				edges.append(GraphEdge(source=nodes[i].id, target=nodes[target].id, weight=CROSS_LINK_WEIGHT))

	return GraphData(nodes=tuple(nodes), edges=tuple(edges))
