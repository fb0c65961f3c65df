"""
Emitter 출력 형식 테스트
"""
import io
import math

import numpy as np

from gcode_octave.emitter import OctaveEmitter, format_values
from gcode_octave.models import Segment


def make_segment():
    segment = Segment(layer=3, type_code="fi")
    segment.x, segment.y, segment.z = [0.0, 10.0], [0.0, 0.5], [0.2, 0.2]
    segment.d, segment.e, segment.f = [0.0, 10.0126], [1.0, 1.25], [-1.0, 1200.0]
    return segment


class TestFormatValues:
    """배열 값 포맷"""

    def test_fixed_point(self):
        """%8.3f"""
        assert format_values(np.array([0.0, 10.0, -2.5])) == "   0.000   10.000   -2.500"

    def test_integer(self):
        """feed rate 는 %8d (소수점 버림)"""
        assert format_values(np.array([-1.0, 1200.0, 1500.9]), integer=True) == "      -1     1200     1500"

    def test_non_finite(self):
        """NaN/Inf 는 NaN"""
        assert format_values(np.array([math.nan, 1.0])) == "     NaN    1.000"
        assert format_values(np.array([math.inf]), integer=True) == "     NaN"

    def test_empty(self):
        """빈 배열"""
        assert format_values(np.array([])) == ""


class TestOctaveEmitter:
    """Octave 스크립트 출력"""

    def test_segment_arrays_and_plot(self):
        """배열 6개 + plot3"""
        out = io.StringIO()
        OctaveEmitter(out).emit_segment(make_segment())
        lines = out.getvalue().splitlines()
        assert lines == [
            "x3fi=[   0.000   10.000];",
            "y3fi=[   0.000    0.500];",
            "z3fi=[   0.200    0.200];",
            "d3fi=[   0.000   10.013];",
            "e3fi=[   1.000    1.250];",
            "f3fi=[      -1     1200];",
            "plot3( x3fi,y3fi,z3fi, 'LineWidth', 2); grid on; hold on;",
        ]

    def test_comment(self):
        """원본 라인 주석"""
        out = io.StringIO()
        OctaveEmitter(out).emit_comment(";LAYER:0", 7)
        assert out.getvalue() == "%;LAYER:0\n"

    def test_comment_with_line_number(self):
        """라인 번호 주석"""
        out = io.StringIO()
        OctaveEmitter(out, lnum=True).emit_comment("G1 X1", 7)
        assert out.getvalue() == "%    7: G1 X1\n"

    def test_diagnostic(self):
        """syntax error 주석"""
        out = io.StringIO()
        OctaveEmitter(out).emit_diagnostic("unknown Q")
        assert out.getvalue() == "% syntax error: unknown Q\n"

    def test_header(self):
        """헤더 배너 (빈 줄은 %)"""
        out = io.StringIO()
        OctaveEmitter(out).emit_header(["matlab/octave file", "a.g -> a.m", ""])
        assert out.getvalue() == "% matlab/octave file\n% a.g -> a.m\n%\n"
