"""
Prompt Renderer

Substitutes the ``${fileName}`` and ``${codeContent}`` placeholders into a
tab's prompt template.
"""

import re

from code_insight.core.config.constants import PLACEHOLDER_CODE_CONTENT, PLACEHOLDER_FILE_NAME

_PLACEHOLDER_PATTERN = re.compile(
    r"\$\{(" + PLACEHOLDER_FILE_NAME + "|" + PLACEHOLDER_CODE_CONTENT + r")\}"
)


def render_prompt(template: str, file_name: str, code_content: str) -> str:
    """
    Replace every placeholder occurrence verbatim.

    Single pass: substituted values are never re-expanded, so file content
    that itself contains ``${fileName}`` is left as-is.
    """
    values = {
        PLACEHOLDER_FILE_NAME: file_name,
        PLACEHOLDER_CODE_CONTENT: code_content,
    }
    return _PLACEHOLDER_PATTERN.sub(lambda match: values[match.group(1)], template)
