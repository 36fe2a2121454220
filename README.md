# scopview

The parts of a small 3D model viewer that do not need a window:

- reading Wavefront `.obj` geometry and `.mtl` material libraries
  (`scopview.objfile`, `scopview.parser`),
- decoding 24- and 32-bit uncompressed `.bmp` images into BGRA pixels
  (`scopview.bmp`),
- turning parsed geometry into vertex and index buffers, with generated
  face normals, smooth shading and triangulation of polygons
  (`scopview.model`),
- matrix helpers, an arcball camera and a rotating light
  (`scopview.transforms`, `scopview.camera`),
- a skybox cube and texture upload through a graphics backend object
  (`scopview.skybox`, `scopview.gl`),
- the viewer's settings and per-frame timing logic (`scopview.app`),
- a text-editing state machine with bounded undo and redo
  (`scopview.textedit_state`, `scopview.textedit_motion`,
  `scopview.textedit_keys`).

Install with its test extra to run the tests:

```
pip install -e .[test]
pytest
```

## Loading a model

```python
from scopview.objfile import load_object

obj = load_object("models/teapot.obj")
print(len(obj.vertices), "positions")
print(len(obj.groups), "shading groups")
print(obj.minimum, obj.maximum)
```

The file name must end in `.obj`, otherwise `ValueError` is raised. A
syntax error raises `ValueError` whose message starts with
`Bad syntax at line N:`; a file that cannot be opened raises `OSError`.
`parse_object(lines, base_path)` does the same work on any iterable of
lines.

`mtllib` statements are resolved relative to the `.obj` file, and
`usemtl` selects the material of the polygons that follow; an unknown
material name is logged as a warning. Libraries can also be read on their
own:

```python
from scopview.parser import load_material_library

materials = {}
load_material_library("models/teapot.mtl", materials)
for name, material in materials.items():
    print(name, material.uniform_data())
```

`load_material_library` never raises: a missing file or a malformed
library is logged and leaves the dictionary unchanged. Materials already
in the dictionary keep their place; new ones are numbered after them.
`map_Kd` textures are looked up under `resources/textures/`.

## Reading a BMP image

```python
from scopview.bmp import read_bmp

image = read_bmp("resources/textures/front.bmp")
print(image.width, image.height, image.pixels.shape)  # (height, width, 4)
raw = image.data                                        # BGRA bytes, top row first
```

Only uncompressed or bitfield images with 24 or 32 bits per pixel are
accepted; anything else raises `ValueError`. The alpha channel of 24-bit
images is set to 255.

## Building buffers

```python
import random
from scopview.model import load_model, triangulate

model = load_model("models/teapot.obj", random.Random(42))
model.vertex_data          # float32: positions, uvs, normals, colours, material slots
model.indices              # uint32 triangle indices
model.material_uniforms()  # slot 0 is the default material
model.texture_paths        # texture unit -> file

triangulate(5)  # [(1, 0, 2), (0, 2, 4), (2, 4, 3)]
```

The model is centred on the origin and scaled so its largest coordinate
is 1. Missing texture coordinates and normals are generated.
`model.rotate(degrees)` and `model.matrix()` give the spin around the
vertical axis. `model.palette` is a `ColorPalette` whose `enabled` flag
switches between per-face greys and a uniform medium grey; `update()`
returns the colours it wrote, or `None` if nothing changed.

## Camera and light

```python
from scopview.camera import ArcballCamera, LightSource

camera = ArcballCamera(800, 600)
camera.rotate(0.1, 0.05)   # radians, horizontal then vertical
camera.translate(0.2, 0.0)
camera.zoom(1.0)
projection_view = camera.matrix()

light = LightSource()
light.angle = 90.0
light.position()
```

`scopview.transforms` provides `radians`, `normalize`, `cross`,
`perspective`, `look_at`, `rotate`, `translate` and `rotate_vector`;
matrices are 4x4 numpy arrays applied as `matrix @ point`.

## Graphics backend

`scopview.gl.GLBackend` describes the calls made for texture upload:
`get_error`, `gen_texture`, `active_texture`, `bind_texture`,
`tex_parameter` and `tex_image_2d`. `load_texture(backend, path, unit)`
reads a BMP and returns the texture id; a pending error code after any
call raises `GLError`. `Skybox.upload` and `Skybox.render` additionally
use `gen_vertex_array`, `bind_vertex_array`, `gen_buffer`, `bind_buffer`,
`buffer_data`, `enable_vertex_attrib_array`, `vertex_attrib_pointer`,
`depth_mask` and `draw_elements`; a `ColorPalette` given a backend uses
`buffer_sub_data`. `load_skybox(root)` reads the six faces from
`resources/textures/` under `root`.

## Viewer logic

`scopview.app` holds `Settings`, the `ShaderType` presets,
`check_arguments(argv)` (exactly one model path, otherwise `ValueError`),
`drag_to_rotation`, `skybox_view` (a view matrix without translation)
and `handle_time(settings, model, now)`, which spins the model one full
turn per ten seconds and fades the texture in or out over two seconds.

## Text editing

```python
from scopview.textedit_keys import Key, key
from scopview.textedit_state import EditableText, TextEditState, initialize_state

text = EditableText("hello")
state = TextEditState()
initialize_state(state, single_line=True)
key(text, state, Key.TEXTEND)
key(text, state, " world")
key(text, state, Key.UNDO)
str(text)  # "hello"
```

`key` accepts a `Key` code, optionally combined with `Key.SHIFT`, a
character code point, or a string to type. `scopview.textedit_motion`
exposes the underlying operations (`click`, `drag`, `cut`, `paste`,
`insert_text`, word motion, selection handling).

## What this package does not do

There is no command and no window: nothing opens a display, reads mouse
or keyboard input, or draws a settings panel. Shader programs are not
loaded, compiled or given uniforms, and the model's buffers are built as
numpy arrays but not uploaded; a real renderer has to supply those parts
and a `GLBackend` implementation.