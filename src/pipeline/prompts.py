"""提示词模板 - 与具体模型解耦的提示词构建."""

from dataclasses import dataclass, field
from string import Template
from typing import Tuple


@dataclass(frozen=True)
class PromptTemplate:
    """带必填变量检查的提示词模板."""

    name: str
    template: str
    required: Tuple[str, ...] = field(default_factory=tuple)

    def render(self, **values) -> str:
        missing = [key for key in self.required if key not in values]
        if missing:
            raise KeyError(f"Prompt '{self.name}' missing values: {', '.join(missing)}")
        return Template(self.template).substitute(**values).strip()


SUMMARY_SYSTEM_MESSAGE = (
    "You are a precise summarization assistant. Return only the summary text."
)

TRANSLATION_SYSTEM_MESSAGE = (
    "You are a professional translator. Translate accurately and maintain the "
    "original meaning. Return only the translated text without explanations."
)

SUMMARY_PROMPT = PromptTemplate(
    name="summary",
    template="""
Summarize the following text in a clear and concise manner, capturing all essential points and conclusions.
IMPORTANT: Your response must start directly with the first sentence of the summary. Do not include any introductory phrases like "Here is a summary:".
Here is the text:
---
$text
---
Summary:""",
    required=("text",),
)

RECOMBINE_PROMPT = PromptTemplate(
    name="recombine",
    template="""
The following are summaries of consecutive sections of one document. Combine them into a single concise summary that keeps every essential point and removes repetition.
IMPORTANT: Your response must start directly with the first sentence of the summary.
---
$text
---
Summary:""",
    required=("text",),
)

TRANSLATION_PROMPT = PromptTemplate(
    name="translation",
    template="""
Translate the following text from $source_language to $target_language.
Tokens that look like __PROTECTED_0_0__ are placeholders: copy them unchanged.

$text""",
    required=("text", "source_language", "target_language"),
)


@dataclass(frozen=True)
class PromptLibrary:
    """管道使用的全部提示词."""

    summary: PromptTemplate = SUMMARY_PROMPT
    recombine: PromptTemplate = RECOMBINE_PROMPT
    translation: PromptTemplate = TRANSLATION_PROMPT
    summary_system: str = SUMMARY_SYSTEM_MESSAGE
    translation_system: str = TRANSLATION_SYSTEM_MESSAGE


DEFAULT_PROMPTS = PromptLibrary()
