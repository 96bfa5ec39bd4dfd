"""Tests for the heading/TOC deriver."""

import re

from bookmagic.markdown import markdown_to_html
from bookmagic.toc import extract_toc_entries, generate_table_of_contents, strip_toc


class TestExtractTocEntries:

    def test_skips_title_heading(self, pandoc_html):
        entries = extract_toc_entries(pandoc_html)
        assert [e.anchor_id for e in entries] == ["chapter-one", "a-section", "a-detail", "chapter-two"]

    def test_page_numbers_start_at_two_and_increase(self, pandoc_html):
        pages = [e.page_number for e in extract_toc_entries(pandoc_html)]
        assert pages[0] == 2
        assert all(b > a for a, b in zip(pages, pages[1:]))

    def test_text_is_stripped_and_collapsed(self, pandoc_html):
        entries = extract_toc_entries(pandoc_html)
        assert entries[0].text == "Chapter One"
        assert entries[1].text == "A Section"

    def test_without_subheadings_keeps_h1_only(self, pandoc_html):
        entries = extract_toc_entries(pandoc_html, include_subheadings=False)
        assert [(e.level, e.page_number) for e in entries] == [(1, 2), (1, 3)]

    def test_headings_without_id_are_ignored(self):
        assert extract_toc_entries("<h1>No id</h1><h2 class='x'>Nope</h2>") == []


class TestGenerateTableOfContents:

    def test_renders_entries(self, pandoc_html):
        toc = generate_table_of_contents(pandoc_html, "serif-classic")
        assert 'class="table-of-contents"' in toc
        assert toc.count('class="toc-entry') == 4
        assert 'toc-level-2" style="margin-left: 1.5em;"' in toc
        assert 'toc-level-3" style="margin-left: 3em;"' in toc
        assert 'toc-level-1" style=""' in toc
        assert '<span class="toc-dots"></span>' in toc

    def test_page_numbers_in_markup(self, pandoc_html):
        toc = generate_table_of_contents(pandoc_html, "trade-clean")
        pages = [int(p) for p in re.findall(r'<span class="toc-page">(\d+)</span>', toc)]
        assert pages == [2, 3, 4, 5]

    def test_idempotent(self, pandoc_html):
        first = generate_table_of_contents(pandoc_html, "novella-a5")
        second = generate_table_of_contents(pandoc_html, "novella-a5")
        assert first == second

    def test_absent_without_eligible_headings(self):
        assert generate_table_of_contents("<p>Just text</p>", "serif-classic") == ""

    def test_fallback_html_yields_no_toc(self):
        html = markdown_to_html("# Chapter One\n\nText\n\n## Section")
        assert generate_table_of_contents(html, "serif-classic") == ""

    def test_only_title_heading_yields_no_toc(self):
        html = '<h1 class="title" id="t">Book</h1>'
        assert generate_table_of_contents(html, "serif-classic") == ""

    def test_data_id_attribute_is_not_the_anchor(self):
        html = '<h1 data-id="wrong" id="right">Chapter</h1><h2 data-id="only">No anchor</h2>'
        entries = extract_toc_entries(html)
        assert [e.anchor_id for e in entries] == ["right"]

    def test_strip_toc_removes_rendered_block(self, pandoc_html):
        toc_html = generate_table_of_contents(pandoc_html)
        assert strip_toc("<p>Before</p>" + toc_html + "<p>After</p>") == "<p>Before</p><p>After</p>"
