"""Tests for engine configuration and page ranges."""

import pytest

from engine import ColumnEngine, EngineConfig, PageRange, SimulatedLayout
from utils.validation import ConfigurationError

from conftest import document, uneven_section


class TestEngineConfig:

    def test_defaults(self):
        config = EngineConfig.default()

        assert config.max_space_after == 40.0
        assert config.progress_interval_pages == 25
        assert config.validate()

    @pytest.mark.parametrize("overrides", [
        {'max_space_after': 0},
        {'max_space_after': -5},
        {'progress_interval_pages': 0},
        {'max_probe_lines': 0},
        {'undo_record_name': ''},
    ])
    def test_invalid_values_rejected(self, overrides):
        assert not EngineConfig(**overrides).validate()

    def test_from_dict_ignores_unknown_keys(self):
        config = EngineConfig.from_dict({'max_space_after': 12.5, 'colour': 'blue'})

        assert config.max_space_after == 12.5
        assert not hasattr(config, 'colour')

    def test_round_trip_through_dict(self):
        config = EngineConfig(max_space_after=18.0, progress_interval_pages=10)

        assert EngineConfig.from_dict(config.to_dict()) == config

    def test_iteration_cap_is_not_configurable(self):
        config = EngineConfig.from_dict({'max_iterations': 50})

        assert 'max_iterations' not in config.to_dict()
        assert not hasattr(config.balancer_options(), 'max_iterations')

    def test_serialized_keys(self):
        assert set(EngineConfig().to_dict()) == {
            'max_space_after',
            'max_probe_lines',
            'progress_interval_pages',
            'undo_record_name',
            'enable_debug_logging',
        }

    def test_processor_options_follow_engine_config(self):
        config = EngineConfig(max_space_after=30.0, max_probe_lines=50)

        assert config.balancer_options().max_space_after == 30.0
        assert config.locator_options().max_probe_lines == 50

    def test_engine_rejects_invalid_config(self):
        layout = SimulatedLayout(document([uneven_section()]))

        with pytest.raises(ConfigurationError):
            ColumnEngine(layout, config=EngineConfig(max_space_after=0))


class TestPageRange:

    def test_open_ended(self):
        assert PageRange(start=3).to_page_numbers(5) == [3, 4, 5]

    def test_clamped_to_document(self):
        assert PageRange(start=2, end=9).to_page_numbers(4) == [2, 3, 4]

    def test_start_past_document(self):
        assert PageRange(start=6).to_page_numbers(4) == []

    @pytest.mark.parametrize("start, end", [(0, None), (3, 2), (1, 0)])
    def test_invalid_bounds(self, start, end):
        with pytest.raises(ValueError):
            PageRange(start=start, end=end)

    def test_single_page(self):
        assert PageRange.single_page(2).to_page_numbers(3) == [2]


class TestEngineLifecycle:

    def test_operations_require_open_engine(self):
        layout = SimulatedLayout(document([uneven_section()]))
        engine = ColumnEngine(layout, host=layout)

        with pytest.raises(RuntimeError):
            engine.apply()

    def test_context_manager_initializes_processors(self):
        layout = SimulatedLayout(document([uneven_section()]))

        with ColumnEngine(layout, host=layout) as engine:
            assert engine.is_open
            assert engine.get_status()['processors'] == ['locator', 'extractor', 'balancer']

        assert not engine.is_open

    def test_close_releases_processors(self):
        layout = SimulatedLayout(document([uneven_section()]))

        with ColumnEngine(layout, host=layout) as engine:
            pass

        assert engine.get_status()['processors'] == []
        with pytest.raises(RuntimeError):
            engine.balancer

    def test_processors_bound_on_open(self):
        layout = SimulatedLayout(document([uneven_section()]))

        with ColumnEngine(layout, host=layout) as engine:
            assert engine.locator.is_bound
            assert engine.extractor.is_bound
            assert engine.balancer.is_bound

    def test_host_without_spacing_operations_rejected(self):
        class ReadOnlyLayout:
            def vertical_position(self, point):
                return 0.0

            def advance_by_line(self, point):
                return point

        engine = ColumnEngine(ReadOnlyLayout())

        with pytest.raises(ConfigurationError) as excinfo:
            engine.open()

        message = str(excinfo.value)
        assert 'ColumnHeightBalancer' in message
        assert 'set_trailing_space' in message
        assert 'recompute_layout' in message
        assert 'ColumnBreakLocator' not in message
        assert not engine.is_open
        assert engine.get_status()['processors'] == []
