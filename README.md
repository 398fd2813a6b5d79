# simul8

simul8 is a small 2D particle physics sandbox. Particles move under gravity
(position-based Verlet integration) and are held by constraints: a circle, or
a thin circular wall with an open arc. Triggers fire events; by default a new
particle spawns whenever one leaves the unit circle. Frames are computed on a
background thread and cached, so the playhead can be moved back and forth
without running the simulation again.

## Installation

```
pip install .
```

Python 3.10 or later is needed. pygame is used for the window and drawing.

## Running

```
simul8
```

`python -m simul8.app` does the same. The command accepts `--help` and no
other options. If the application fails, the error is logged and printed to
standard error, and the command exits with status 1.

The window has three parts:

- **Timeline** (bottom): shows the time range (0 to 3.5 s), tick marks every
  0.25 s with labels on whole seconds, a white playhead, and a yellow line
  showing how far the computed frames reach. Click or drag on the slider to
  move the playhead.
- **Editor** (left): a text listing of the triggers, constraints, gravity and
  the particle-collision setting of the initial state.
- **Preview** (right): the simulation at the playhead.

Keys:

| Key | Action |
| --- | --- |
| space | play / pause |
| c | clear the simulation cache and recompute from the initial state |
| t | add an "Any particle left circular bound" trigger (radius 1, no events) |
| 1 | add a circle constraint |
| 2 | add a circle-with-hole constraint |
| backspace | remove the last constraint |
| delete | remove the last trigger |
| p | toggle particle-particle collisions |
| arrow keys | change gravity by 0.01 along x or y |

Any edit restarts the simulation from the edited initial state. The
simulation runs at 60 frames per simulated second.

## What the window does not do

The window cannot change the time range, the radius of a trigger, the events
of a trigger, the particle a spawn event creates, or the radius, opening or
elasticity of a constraint; these are only reachable from code. Scenes cannot
be saved or loaded.

## Using the library

The simulation core works without a window:

```python
from simul8.constraints import CircleConstraint
from simul8.events import AnyLeftCircleTrigger, SpawnEvent, TriggerManager
from simul8.particle import Particle
from simul8.state import SimulationState
from simul8.util import Color32
from simul8.vector import Vec2

state = SimulationState()
state.gravity_accel = Vec2(0.0, 0.25)
state.add_constraint(CircleConstraint())
state.add_particle(Particle.create(Vec2.ZERO, 0.05, Color32.RED))
state.add_trigger_manager(
    TriggerManager(
        AnyLeftCircleTrigger(1.0),
        [SpawnEvent(Particle.create(Vec2.ZERO, 0.05, Color32.RED))],
    )
)

for _ in range(60):
    state.single_step(1 / 60)
```

`simul8.app.default_initial_state()` returns the state the window starts
from.

Modules:

- `simul8.vector` – `Vec2`, an immutable 2D vector.
- `simul8.particle` – `Particle`, with velocity implied by its last position.
- `simul8.constraints` – `CircleConstraint` and `HoleCircleConstraint`.
- `simul8.events` – `TriggerManager`, `AnyLeftCircleTrigger`, `SpawnEvent`.
- `simul8.state` – `SimulationState` with `single_step` and `multi_step`.
- `simul8.manager` – `SimulationInterface` and `SimulationManager`; `connect()`
  returns a wired pair. Call `SimulationManager.process_requests` on a worker
  and `SimulationInterface.process_requests` from the UI side.
- `simul8.rendering` – `CpuSimRenderer`, drawing a state onto a pygame surface.
- `simul8.timeline` – `Timeline`, the playhead, range and tick geometry.
- `simul8.editor` – `Editor`, adding and removing triggers and constraints.
- `simul8.util` – `Color32`, `Hsva`, `OverwriteSlot` and small helpers.

## Tests

```
pip install .[test]
pytest
```