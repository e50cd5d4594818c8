"""
===============================================================================
QUATCORE - Command Line Test Suite
===============================================================================
Runs the quatcore entry point in-process and checks its printed output and
exit status.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from quatcore import InvalidArgumentError, identity, q
from quatcore.main import main, parse_operands


@pytest.fixture
def named_config(tmp_path):
    path = tmp_path / 'quatcore.yaml'
    path.write_text(
        "quaternions:\n"
        "  unit: {w: 1.0}\n"
        "  lean: {w: 1.0, x: 2.0}\n"
    )
    return str(path)


def run_cli(capsys, *argv):
    """Run main() and return (exit status, stdout lines)."""
    status = main(list(argv))
    out = capsys.readouterr().out
    return status, out.splitlines()


class TestParseOperands:
    """Tests for operand tokenisation."""

    def test_numeric_operands(self):
        a, b = parse_operands(['1', '2', '3', '4', '2', '-1', '-2', '-3'], 2, {})
        assert a == q(1.0, 2.0, 3.0, 4.0)
        assert b == q(2.0, -1.0, -2.0, -3.0)

    def test_named_and_numeric(self):
        a, b = parse_operands(['unit', '0', '1', '0', '0'], 2, {'unit': identity()})
        assert a == identity()
        assert b == q(0.0, 1.0, 0.0, 0.0)

    def test_named_operand_is_copied(self):
        named = {'unit': identity()}
        (p,) = parse_operands(['unit'], 1, named)
        p.scale_in_place(2.0)
        assert named['unit'] == identity()

    @pytest.mark.parametrize("tokens,count", [
        (['1', '2', '3'], 1),
        (['1', '2', '3', '4'], 2),
        (['1', '2', '3', '4', '5', '6', '7', '8'], 1),
        (['spam'], 1),
    ])
    def test_invalid(self, tokens, count):
        with pytest.raises(InvalidArgumentError):
            parse_operands(tokens, count, {})

    def test_unparseable_token_is_named(self):
        with pytest.raises(InvalidArgumentError, match="'tilt'"):
            parse_operands(['1', 'tilt', '0', '0'], 1, {})


class TestCommands:
    """End-to-end command tests."""

    def test_mul(self, capsys):
        status, lines = run_cli(capsys, 'mul', '1', '2', '3', '4', '2', '-1', '-2', '-3')
        assert status == 0
        assert lines == ["Quaternion { w: 22.0, x: 2.0, y: 6.0, z: 4.0 }"]

    def test_add(self, capsys):
        status, lines = run_cli(capsys, 'add', '1', '2', '3', '4', '1', '1', '1', '1')
        assert status == 0
        assert lines == ["Quaternion { w: 2.0, x: 3.0, y: 4.0, z: 5.0 }"]

    def test_normalize_zero(self, capsys):
        status, lines = run_cli(capsys, 'normalize', '0', '0', '0', '0')
        assert status == 0
        assert lines == ["Quaternion { w: 1.0, x: 0.0, y: 0.0, z: 0.0 }"]

    def test_length(self, capsys):
        status, lines = run_cli(capsys, 'length', '0', '3', '4', '0')
        assert status == 0
        assert lines == ["length: 5.0", "square_length: 25.0"]

    def test_compare(self, capsys):
        status, lines = run_cli(capsys, '--epsilon', '1e-6', 'compare',
                                '1', '0', '0', '0', '1', '0', '0', '0.0001')
        assert status == 0
        assert lines[0] == "equal: False"
        assert lines[1].startswith("roughly_eq: True")

    def test_euler_degrees(self, capsys):
        status, lines = run_cli(capsys, 'euler', '--degrees', '0', '0', '180')
        assert status == 0
        assert lines[0].endswith("z: 1.0 }")

    def test_euler_radians(self, capsys):
        status, lines = run_cli(capsys, 'euler', '0', '0', '0')
        assert status == 0
        assert lines == [str(identity())]

    def test_named_operand(self, capsys, named_config):
        status, lines = run_cli(capsys, '--config', named_config, 'conjugate', 'lean')
        assert status == 0
        assert lines == ["Quaternion { w: 1.0, x: -2.0, y: -0.0, z: -0.0 }"]

    def test_invalid_operands_exit_2(self, capsys):
        status, lines = run_cli(capsys, 'mul', '1', '2', '3')
        assert status == 2
        assert lines == []

    def test_missing_config_exit_2(self, capsys, tmp_path):
        status, lines = run_cli(capsys, '--config', str(tmp_path / 'missing.yaml'),
                                'length', '1', '0', '0', '0')
        assert status == 2
        assert lines == []

    @pytest.mark.parametrize("text", [
        "settings: [unclosed\n",
        "settings: {epsilon: abc}\n",
        "settings: 5\n",
        "quaternions: [1, 2]\n",
        "quaternions:\n  bad: {w: abc}\n",
    ])
    def test_bad_config_exit_2(self, capsys, tmp_path, text):
        path = tmp_path / 'quatcore.yaml'
        path.write_text(text)
        status, lines = run_cli(capsys, '--config', str(path), 'length', '1', '0', '0', '0')
        assert status == 2
        assert lines == []

    def test_missing_command(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2
