"""
Unit Tests for Prompt Rendering
"""

import pytest

from code_insight.llm_stream.prompt_renderer import render_prompt


@pytest.mark.unit
class TestRenderPrompt:
    def test_substitutes_every_occurrence(self):
        template = "${fileName}: ${codeContent} (${fileName})"

        assert render_prompt(template, "a.ts", "x = 1") == "a.ts: x = 1 (a.ts)"

    def test_values_are_verbatim(self):
        code = "const s = `${x}`; // $1 \\n"

        assert render_prompt("${codeContent}", "a.ts", code) == code

    def test_substituted_values_are_not_re_expanded(self):
        code = "print('${fileName}')"

        assert render_prompt("${codeContent}", "a.py", code) == "print('${fileName}')"

    def test_unknown_placeholders_untouched(self):
        assert render_prompt("${language} ${fileName}", "a.ts", "") == "${language} a.ts"

    def test_template_without_placeholders(self):
        assert render_prompt("Explain.", "a.ts", "code") == "Explain."
