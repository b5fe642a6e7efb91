# raycube

raycube draws a maze from a first-person view. It casts one ray per screen column through a grid.
The maze comes from a `.cub` scene file. pygame opens the window, and numpy holds the frame buffer.

## Installation

```
pip install .
```

To install the test tools as well:

```
pip install .[test]
```

## Running

```
raycube path/to/level.cub
raycube --bonus path/to/level.cub
```

The scene path must be the only argument, apart from an optional leading `--bonus`.

- The path must end in `.cub`, and the file must exist.
- If either check fails, raycube prints an error and exits with status 1.
- If the scene itself is rejected, raycube prints the reason and exits without opening a window. A scene is rejected for a bad header, a bad map, or a texture that cannot be loaded.

## Scene files

A scene file starts with six header entries. They may come in any order, with blank lines between them:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0
```

- `NO`, `SO`, `WE` and `EA` name the wall textures. raycube loads them with `pygame.image.load`, so any image format pygame can read will work.
- `F` and `C` give the floor and ceiling colours as `R,G,B`:
  - There must be exactly two commas.
  - Only digits and spaces are allowed.
  - Each value runs from 0 to 255.
- An entry that appears twice is an error.
- A file that ends before all six entries are set is an error.

The map follows the header. It may contain these characters:

| Character | Meaning |
|---|---|
| `1` | wall |
| `0` | open floor |
| space | outside the map |
| `N`, `S`, `E`, `W` | player start and facing direction |
| `D` | closed door (bonus mode only) |

The map must also follow these rules:

- There must be exactly one player start.
- The walls must enclose every cell the player can reach.
- Once the map has begun, an empty line may not be followed by more map text.
- A map may have at most 2000 rows.

## Controls

| Key | Action |
|---|---|
| `W` / `S` | move forward / backward |
| `A` / `D` | strafe left / right |
| Left / Right arrows | turn |
| `Esc` | quit |

Closing the window also quits.

### Bonus mode

`--bonus` adds the following:

- **Intro screen.** The game starts on an intro screen. Press `Enter` to leave it.
- **Mouse look.** Moving the mouse turns the view and tilts it up or down. The pointer is hidden and put back in the middle of the window every frame.
- **Doors.** `E` opens or closes a door just in front of you. A door passes through a moving state before it is fully open or closed. You can walk through open doors.
- **Minimap.** Holding `M` shows an overhead map in place of the 3D view. Movement keys are ignored while it is shown.

Bonus mode also loads these images from `assets/sprites/` relative to the current directory:

- `door.xpm`
- `door_mid.xpm`
- `door_side.xpm`
- `logo.xpm`
- `text.xpm`
- `handmap.xpm`

## Using the library

You can load scenes and cast rays without opening a window:

```python
from raycube.app import load_scene, format_map
from raycube.player import Player
from raycube.raycast import cast

scene = load_scene("maps/level.cub", bonus=False)
print(format_map(scene))

level = scene.level
player = Player.spawn(level.start_row, level.start_col, level.facing)
hit = cast(level.grid, player, column=750)
print(hit.distance, hit.top, hit.bottom)
```

Other entry points:

- `raycube.scene.read_header` and `raycube.scene.parse_color` parse a scene header.
- `raycube.level.Level.from_lines` validates a map.
- All three raise `raycube.scene.SceneError` when the input is invalid.
- `raycube.render.render_view` draws a whole view into a `raycube.render.Frame`, which is a numpy array of `0xRRGGBB` pixels.
- `raycube.app.Game.frame()` produces the next frame for a loaded scene and a set of textures.

## Limitations

- There is no sound, and there are no enemies, items or goals. The game is a maze to walk through.
- The on-screen frame rate is not shown. `raycube.app.FpsCounter` measures it for callers who want it.