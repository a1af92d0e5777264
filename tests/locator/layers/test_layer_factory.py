"""Tests for LayerFactory and the wrapping palette index."""
from __future__ import annotations

import threading

import pytest

from locator.layers.factory import PALETTE, ColorCycle, LayerFactory
from locator.layers.layer import OverlayDescriptor


def descriptor(n: int) -> OverlayDescriptor:
    return OverlayDescriptor(title=f"Layer {n}", name=f"type{n}")


@pytest.mark.unit
class TestColorCycle:
    def test_palette_has_seven_colors(self):
        assert len(PALETTE) == 7
        assert PALETTE[0] == "#1f78b4"
        assert PALETTE[-1] == "#b15928"

    def test_cycles_in_order_and_wraps(self):
        cycle = ColorCycle()
        colors = [cycle.next() for _ in range(len(PALETTE) + 2)]
        assert colors[: len(PALETTE)] == list(PALETTE)
        assert colors[len(PALETTE):] == [PALETTE[0], PALETTE[1]]
        assert cycle.index == len(PALETTE) + 2

    def test_custom_colors(self):
        cycle = ColorCycle(["red", "blue"])
        assert [cycle.next() for _ in range(3)] == ["red", "blue", "red"]

    def test_empty_palette_rejected(self):
        with pytest.raises(ValueError):
            ColorCycle([])

    def test_concurrent_next_hands_out_every_index(self):
        cycle = ColorCycle(["c"])

        def take():
            for _ in range(200):
                cycle.next()

        threads = [threading.Thread(target=take) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert cycle.index == 800


@pytest.mark.unit
class TestLayerFactory:
    def test_build_returns_unloaded_layer(self, fetcher, urls, geo_service):
        factory = LayerFactory(fetcher, urls["layers"], colors=ColorCycle())
        layer = factory.build(descriptor(1))
        assert layer.title == "Layer 1"
        assert layer.type == "type1"
        assert layer.url == urls["layers"]
        assert layer.is_loaded() is False
        assert geo_service.requests == []

    def test_consecutive_builds_take_consecutive_colors(self, fetcher, urls):
        factory = LayerFactory(fetcher, urls["layers"], colors=ColorCycle())
        layers = [factory.build(descriptor(n)) for n in range(len(PALETTE) + 1)]
        assert [l.color for l in layers[: len(PALETTE)]] == list(PALETTE)
        # the eighth layer wraps back to the first color
        assert layers[len(PALETTE)].color == layers[0].color

    def test_default_cycle_is_shared_between_factories(self, fetcher, urls):
        first = LayerFactory(fetcher, urls["layers"])
        second = LayerFactory(fetcher, urls["layers"])
        assert first.colors is second.colors

        a = first.build(descriptor(1))
        b = second.build(descriptor(2))
        assert PALETTE.index(b.color) == (PALETTE.index(a.color) + 1) % len(PALETTE)

    def test_shared_cycle_repeats_every_seven(self, fetcher, urls):
        factory = LayerFactory(fetcher, urls["layers"])
        layers = [factory.build(descriptor(n)) for n in range(len(PALETTE) + 1)]
        assert layers[-1].color == layers[0].color
        assert len({l.color for l in layers[:-1]}) == len(PALETTE)

    def test_build_all_maps_titles_in_order(self, fetcher, urls):
        factory = LayerFactory(fetcher, urls["layers"], colors=ColorCycle())
        layers = factory.build_all([descriptor(1), descriptor(2), descriptor(3)])
        assert list(layers) == ["Layer 1", "Layer 2", "Layer 3"]
        assert [l.color for l in layers.values()] == list(PALETTE[:3])

    def test_build_all_repeated_title_keeps_last(self, fetcher, urls):
        factory = LayerFactory(fetcher, urls["layers"], colors=ColorCycle())
        layers = factory.build_all(
            [OverlayDescriptor("Same", "a"), OverlayDescriptor("Same", "b")]
        )
        assert list(layers) == ["Same"]
        assert layers["Same"].type == "b"
