"""Tests for terminal card rendering."""

from datetime import datetime
from types import SimpleNamespace

from flashsnap.display import format_card_stats, render_box, render_card


def test_render_box_single_line() -> None:
    lines = render_box("hola").splitlines()
    assert lines == ["  ╭──────╮", "  │ hola │", "  ╰──────╯"]


def test_render_box_pads_to_widest_line() -> None:
    lines = render_box("a\nlonger", indent="").splitlines()
    assert len({len(line) for line in lines}) == 1
    assert lines[1] == "│ a      │"


def test_render_card_with_back_and_context() -> None:
    output = render_card("gato", "cat", "El gato duerme.")
    assert "gato" in output
    assert "  cat" in output
    assert "(El gato duerme.)" in output


def test_render_card_front_only() -> None:
    assert render_card("gato") == render_box("gato")


def test_format_card_stats_new_card() -> None:
    output = format_card_stats(SimpleNamespace(id=1))
    assert "Repetitions:  0" in output
    assert "Interval:     0 days" in output
    assert "Ease factor:  2.50" in output
    assert "not scheduled" in output


def test_format_card_stats_reviewed_card() -> None:
    card = {"interval": 6, "repetition": 2, "ease_factor": 2.36, "next_review": datetime(2026, 2, 1)}
    output = format_card_stats(card)
    assert "6 days" in output
    assert "2.36" in output
    assert "2026-02-01" in output
