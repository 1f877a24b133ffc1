# perhapsengine

These are the building blocks of a small OpenGL 3D engine, built on pyglet, numpy and Pillow.
The package covers vector and matrix maths, transforms, frame timing, windowing, keyboard and
mouse input, audio playback, shaders, materials, textures, framebuffers, vertex uploads and
binary glTF (`.glb`) mesh import with an on-disk cache.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `perhapsengine.mathutils`: 4x4 numpy matrix helpers. It provides `translate`, `rotate` (radians),
  `scale`, `perspective` and `normalize`. It also provides `format_vec` and `format_mat4`, which
  render vectors as ` X: .. Y: ..` and matrices column by column.
- `perhapsengine.transform.Transform`: a position, an Euler rotation in degrees and a scale.
  `update_trs()` and `update_srt()` rebuild the `model` matrix and the `forward`, `right` and
  `up` vectors.
- `perhapsengine.clock.Clock`: call `update()` once per frame. It reports `delta_time`,
  `avg_delta` (the average over roughly the last second) and `start_timer` (seconds since the
  first update). The time source can be injected.
- `perhapsengine.image`: `Image` loads a file through Pillow, optionally flipped vertically.
  `get_pixel(x, y)` returns a `Pixel`. For RGB images the alpha value is 255.
- `perhapsengine.context.Context`: owns the main window and tracks its `dimensions`.
  `create_context(width, height, title)` raises `ContextError` on failure. By default it opens
  a pyglet window with an OpenGL 4.2 context and 4x multisampling. A different window factory
  can be passed in.
- `perhapsengine.input`: `Input` subscribes to a context's window. It provides
  `get_key` / `get_key_down` and `get_mouse` / `get_mouse_down` (down is true only once per
  press). It also offers `mouse_delta`, `mouse_position`, `get_clamped_mouse_pos()`,
  `scroll_delta`, cursor locking with `cursor_lock()`, and WASD or arrow-key movement vectors
  (`get_wasd_vector`, `get_wasd_normalized`). Key codes are in the `Key` and `MouseButton` enums.
- `perhapsengine.audio`: `AudioSystem` registers sounds and returns their ids.
  `play_one_shot` plays a clip without positioning and `play_one_shot_3d` plays it at a point.
  Each call runs on at most `max_channels` voices; when all are busy, the oldest is dropped.
  `set_listener` places and orients the listener, `update()` releases finished voices, and
  `clean_up()` stops everything. Clips are `AudioClip(id, filepath)`.
- `perhapsengine.globjects`: `GLTexture`, `GLCubeMap` and `FBO`, a framebuffer with colour and
  depth texture attachments. All GL calls go through a backend object. By default this is
  `PygletGL`; `set_backend()` replaces it, for example with a recording stub in tests.
  Texture slots 0–29 are accepted; others raise `ValueError`.
- `perhapsengine.rawmodel`: `RawModel(vao, ebo, draw_count)`. `ThreeDRenderer.draw()` draws it
  with indexed or array triangles.
- `perhapsengine.shader`: `Shader` compiles a `.vert`, `.frag` or `.geom` file. Unsupported
  files and compile errors raise `ShaderError`. `ShaderProgram` links a vertex and fragment
  stage, tracks the active program and caches uniform locations. It also provides
  `set_uniform1i/1f/2f/3f/4f`, `set_mat3f` and `set_mat4f`.
- `perhapsengine.model_importer`: `ModelImporter.import_mesh(path)` reads a `.glb` file into a
  `GLMesh` with positions, UVs, normals, tangents, bitangents and indices. It writes a binary
  cache next to the model under the same name with a `.perhaps` suffix
  (`ModelImporter.cache_path`), and reads that cache on later imports.
- `perhapsengine.loader.Loader`: uploads vertex data (`load_positions`, `load_vec3`,
  `load_indexed`, `load_with_uvs`, `load_with_uvs_indexed`). It also imports models as
  `RawModel`s (`import_simple_model`, with attribute locations 0–4 for positions, UVs,
  normals, tangents and bitangents) and loads mipmapped RGB/RGBA textures (`load_texture`).
  `load_cubemap` loads a cube map from `right.png`, `left.png`, `top.png`, `bottom.png`,
  `front.png` and `back.png`. `load_audio` registers sounds with an `AudioSystem`.
- `perhapsengine.material`: `Material` combines a shader program, face culling and
  bind/unbind callbacks. It is registered by id: `Material.get_material(id)` raises `KeyError`
  for unknown ids, and duplicate ids raise `ValueError`. `TexturedMaterial` adds 2D textures to
  consecutive slots and sets their sampler uniforms (default name `textureN`).
- `perhapsengine.skybox_renderer.SkyboxRenderer`: draws a slowly rotating cube map with a
  camera's rotation but not its translation. The camera is set on `cam` and must expose
  `view_matrix` and `projection_matrix`.
- `perhapsengine.gui.ImmediateGUI`: a debug panel drawn over the window. It shows the
  resolution, average FPS and frame time, and a camera position supplied by a callback. It has
  buttons that toggle wireframe rendering and vsync.
- `perhapsengine.application.Application`: opens the window through a `Context` and hooks up
  an `Input` to it.

A custom GL backend must provide the methods that `PygletGL` has. For materials and the skybox
it must also provide `set_cull_face(enabled)` and `depth_func(func)`.

## What this package does not do

There is no scene or object model: no game objects, components, scenes or scene manager. There
is no camera component and no render queue that batches objects by material. No demo game or
command-line program comes with the package. To render anything you open a window with
`Context` and write the frame loop yourself, using the classes above.