"""Unit tests for the console progress bar."""

import io

import pytest


class TestProgressBar:
    def test_format(self):
        from pinray.preview.progress import ProgressBar

        bar = ProgressBar(10)
        bar.set_completed(40)
        assert bar.format() == "[====      ] 40 %"

    def test_empty_and_full(self):
        from pinray.preview.progress import ProgressBar

        bar = ProgressBar(5)
        assert bar.format() == "[     ] 0 %"
        bar.set_completed(100)
        assert bar.format() == "[=====] 100 %"

    def test_completed_is_clamped(self):
        from pinray.preview.progress import ProgressBar

        bar = ProgressBar(4, total=10)
        bar.set_completed(25)
        assert bar.finished == 10
        bar.set_completed(-3)
        assert bar.finished == 0

    def test_without_percent(self):
        from pinray.preview.progress import ProgressBar

        bar = ProgressBar(4, finished=50, print_percent=False)
        assert bar.format() == "[==  ]"

    def test_custom_characters(self):
        from pinray.preview.progress import BarCharacters, ProgressBar

        bar = ProgressBar(4, finished=75, characters=BarCharacters("<", ">", "#", "."))
        assert bar.format() == "<###.> 75 %"

    def test_single_line_output(self):
        from pinray.preview.progress import ProgressBar

        out = io.StringIO()
        bar = ProgressBar(2)
        bar.print(out)
        bar.set_completed(100)
        bar.print(out)
        assert out.getvalue() == "\r[  ] 0 %\r[==] 100 %"

    def test_multi_line_output(self):
        from pinray.preview.progress import ProgressBar

        out = io.StringIO()
        ProgressBar(2, finished=50, single_line=False).print(out)
        assert out.getvalue() == "[= ] 50 %\n"

    @pytest.mark.parametrize("steps, total", [(0, 100), (10, 0)])
    def test_invalid(self, steps, total):
        from pinray.preview.progress import ProgressBar

        with pytest.raises(ValueError):
            ProgressBar(steps, total=total)
