"""Tests for the simulated layout host."""

import pytest

from engine import SimulatedLayout
from models.column_types import TextSpan
from utils.validation import MeasurementFailure

from conftest import document, even_section, one_column, para, two_columns, uneven_section


class TestGeometry:

    def test_sections_stack_down_the_page(self):
        layout = SimulatedLayout(document([one_column([para(2)]), one_column([para(1)])]))

        second_section = layout.section_spans(1)[1]

        assert layout.vertical_position(TextSpan.at(second_section.start)) == 72 + 24

    def test_two_column_section_height_is_taller_column(self):
        doc = document([two_columns([para(2)], [para(5)]), one_column([para(1)])])
        layout = SimulatedLayout(doc)

        following = layout.section_spans(1)[1]

        assert layout.vertical_position(TextSpan.at(following.start)) == 72 + 60

    def test_page_spans_are_contiguous(self):
        layout = SimulatedLayout(document([uneven_section()], [even_section()]))

        assert layout.page_span(1).end == layout.page_span(2).start
        assert layout.page_span(2).end == layout.document_span().end

    def test_page_range_of_span(self):
        layout = SimulatedLayout(document([uneven_section()], [even_section()], [even_section()]))
        span = TextSpan(start=layout.page_span(1).start + 1, end=layout.page_span(2).end)

        pages = layout.page_range(span)

        assert (pages.first_page, pages.last_page) == (1, 2)

    def test_empty_page_has_no_sections(self):
        layout = SimulatedLayout(document([uneven_section()], [], [uneven_section()]))

        assert layout.page_span(2).is_empty
        assert layout.sections_within_page(layout.page_span(2)) == []
        assert [s.page_number for s in layout.sections_within_page(layout.page_span(3))] == [3]

    def test_offset_after_empty_page_belongs_to_next_page(self):
        layout = SimulatedLayout(document([uneven_section()], [], [even_section()]))

        assert layout.page_of(layout.page_span(3).start) == 3
        assert layout.page_of(layout.page_span(1).end - 1) == 1
        assert layout.page_of(layout.document_span().end) == 3

    def test_position_outside_document(self):
        layout = SimulatedLayout(document([even_section()]))

        with pytest.raises(MeasurementFailure):
            layout.vertical_position(TextSpan.at(layout.document_span().end + 1))


class TestMutations:

    def test_spacing_pending_until_recompute(self):
        layout = SimulatedLayout(document([one_column([para(1), para(1)])]))
        first, second = layout.paragraphs_within(layout.document_span())

        layout.set_trailing_space(first, 8.0)

        assert layout.get_trailing_space(first) == 8.0
        assert layout.vertical_position(TextSpan.at(second.start)) == 84
        layout.recompute_layout()
        assert layout.vertical_position(TextSpan.at(second.start)) == 92

    def test_negative_spacing_rejected(self):
        layout = SimulatedLayout(document([one_column([para(1)])]))
        paragraph = layout.paragraphs_within(layout.document_span())[0]

        with pytest.raises(ValueError):
            layout.set_trailing_space(paragraph, -1.0)

    def test_to_document_carries_spacing(self):
        layout = SimulatedLayout(document([uneven_section()]))
        paragraph = layout.column_paragraphs(1, 0, 0)[1]

        layout.set_trailing_space(paragraph, 6.5)

        snapshot = layout.to_document()
        assert snapshot.pages[0].sections[0].columns[0][1].space_after == 6.5
