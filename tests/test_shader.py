import numpy as np
import pytest

from perhapsengine import globjects
from perhapsengine.globjects import GL_FRAGMENT_SHADER, GL_GEOMETRY_SHADER, GL_VERTEX_SHADER
from perhapsengine.shader import Shader, ShaderError, ShaderProgram


class FakeGL:
    def __init__(self):
        self.calls = []
        self.next_id = 0
        self.fail_compile = False
        self.locations = {}
        self.sources = []

    def compile_shader(self, kind, source):
        self.next_id += 1
        self.sources.append((kind, source))
        self.calls.append(("compile_shader", (kind,)))
        if self.fail_compile:
            return self.next_id, "syntax error"
        return self.next_id, None

    def create_program(self):
        self.next_id += 1
        self.calls.append(("create_program", ()))
        return self.next_id

    def uniform_location(self, program_id, name):
        self.calls.append(("uniform_location", (program_id, name)))
        return self.locations.get(name, -1)

    def __getattr__(self, name):
        def record(*args):
            self.calls.append((name, args))

        return record

    def names(self, name):
        return [args for n, args in self.calls if n == name]


@pytest.fixture
def gl():
    fake = FakeGL()
    previous = globjects.set_backend(fake)
    ShaderProgram.unbind()
    fake.calls.clear()
    yield fake
    ShaderProgram.unbind()
    globjects.set_backend(previous)


@pytest.fixture
def files(tmp_path):
    vert = tmp_path / "basic.vert"
    vert.write_text("void main()\n{\n}")
    frag = tmp_path / "basic.frag"
    frag.write_text("void main() {}\n")
    return vert, frag


@pytest.mark.parametrize(
    "name, kind",
    [("a.vert", GL_VERTEX_SHADER), ("a.frag", GL_FRAGMENT_SHADER), ("a.geom", GL_GEOMETRY_SHADER)],
)
def test_shader_type_from_extension(gl, tmp_path, name, kind):
    path = tmp_path / name
    path.write_text("x")
    shader = Shader(path)
    assert shader.shader_type == kind
    assert shader.id == 1


def test_source_lines_end_with_newline(gl, files):
    Shader(files[0])
    assert gl.sources[0][1] == "void main()\n{\n}\n"


def test_unsupported_extension(gl, tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("x")
    with pytest.raises(ShaderError):
        Shader(path)
    assert gl.sources == []


def test_missing_file(gl, tmp_path):
    with pytest.raises(FileNotFoundError):
        Shader(tmp_path / "nothing.vert")


def test_compile_failure_deletes_shader(gl, files):
    gl.fail_compile = True
    with pytest.raises(ShaderError, match="syntax error"):
        Shader(files[0])
    assert gl.names("delete_shader") == [(1,)]


def test_program_from_files(gl, files):
    program = ShaderProgram(*files)
    assert program.id == 1
    assert gl.names("attach_shader") == [(1, 2), (1, 3)]
    assert gl.names("link_program") == [(1,)]
    assert gl.names("delete_shader") == [(2,), (3,)]
    assert gl.calls[-1] == ("use_program", (0,))
    assert program.is_active() is False


def test_run_program_only_switches_once(gl):
    program = ShaderProgram()
    program.run_program()
    program.run_program()
    assert gl.names("use_program") == [(program.id,)]
    assert program.is_active() is True


def test_uniform_location_cached(gl):
    gl.locations["time"] = 4
    program = ShaderProgram()
    program.set_uniform1f("time", 2.5)
    program.set_uniform1f("time", 3.0)
    assert len(gl.names("uniform_location")) == 1
    assert gl.names("uniform")[-1] == (4, "1f", (3.0,))


def test_missing_uniform_not_cached(gl):
    program = ShaderProgram()
    program.suppress_errors(True)
    assert program.get_uniform_location("nope") == -1
    assert program.get_uniform_location("nope") == -1
    assert len(gl.names("uniform_location")) == 2


def test_vector_uniforms(gl):
    gl.locations.update(plane=1, camPos=2, size=3, image=4)
    program = ShaderProgram()
    program.set_uniform4f("plane", (0, 1, 0, -2))
    program.set_uniform3f("camPos", np.array([1.0, 2.0, 3.0]))
    program.set_uniform2f("size", (5, 6))
    program.set_uniform1i("image", 2)
    assert gl.names("uniform") == [
        (1, "4f", (0.0, 1.0, 0.0, -2.0)),
        (2, "3f", (1.0, 2.0, 3.0)),
        (3, "2f", (5.0, 6.0)),
        (4, "1i", (2,)),
    ]


def test_mat4_is_column_major(gl):
    gl.locations["model"] = 0
    matrix = np.identity(4)
    matrix[:3, 3] = [7.0, 8.0, 9.0]
    ShaderProgram().set_mat4f("model", matrix)
    location, size, values = gl.names("uniform_matrix")[0]
    assert (location, size) == (0, 4)
    assert values[12:15] == (7.0, 8.0, 9.0)


def test_mat3_shape_checked(gl):
    program = ShaderProgram()
    with pytest.raises(ValueError):
        program.set_mat3f("m", np.identity(4))