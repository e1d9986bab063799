from pathlib import Path

from lox import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_5_runtime_error_stops_execution(capsys):
    with open(EXAMPLES / 'program_5.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    assert run_program(source) is False
    captured = capsys.readouterr()
    assert captured.out == '3'
    assert captured.err == "operands must be numbers.\n[line 3]\n"
