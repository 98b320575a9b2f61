"""Prompt templates for the three output kinds."""

from __future__ import annotations

from dataclasses import dataclass

from tubedigest.pipeline_config import OutputKind


@dataclass(frozen=True)
class PromptSpec:
    """System prompt, user template and sampling limits for one output kind."""

    system: str
    template: str  # formatted with ``title`` and ``transcript``
    max_tokens: int
    temperature: float | None = None

    def render(self, title: str, transcript: str) -> str:
        return self.template.format(title=title, transcript=transcript)


SUMMARY_PROMPT = PromptSpec(
    system=(
        "You are an expert at summarizing video content. Create structured summaries that are "
        "clear, accurate, and actionable. Only include information explicitly stated in the "
        "transcript - do not add external information or make assumptions."
    ),
    template="""Summarize the following transcript from the video "{title}".

Provide your response in this exact structure using markdown:

## Overview
[2-3 sentence high-level summary of what the video covers and its main purpose]

## Main Points
[Bullet points of the key topics and insights, grouped by theme if applicable. Use nested bullets for sub-points.]

## Key Takeaways
[3-5 actionable conclusions, important facts, or things the viewer should remember]

---

TRANSCRIPT:
{transcript}""",
    max_tokens=2000,
)

KEY_POINTS_PROMPT = PromptSpec(
    system=(
        "You are an expert at extracting key information from video transcripts. Your task is "
        "to identify and list the most important points EXACTLY as stated in the transcript. "
        "Do NOT paraphrase or summarize - extract direct facts, claims, and actionable items "
        "using the speaker's original wording where possible."
    ),
    template="""Extract the key points from this transcript of "{title}".

IMPORTANT: This should be EXTRACTIVE, not abstractive. Pull out specific facts, statistics, quotes, and claims directly from the transcript. Do not rephrase or summarize them.

Format your response EXACTLY as:

## Main Takeaways
[3-5 most important insights - use direct quotes or close paraphrases]

## Key Facts & Data
[Specific numbers, statistics, dates, names, or concrete claims mentioned]

## Core Arguments
[Main positions, recommendations, or assertions the speaker makes]

## Action Items
[Any specific recommendations or next steps mentioned - omit section if none]

---

TRANSCRIPT:
{transcript}""",
    max_tokens=1500,
    temperature=0.0,
)

OUTLINE_PROMPT = PromptSpec(
    system=(
        "You are an expert at creating comprehensive outlines from video content. Your outlines "
        "are so detailed and well-structured that readers don't need to watch the video or read "
        "the transcript. Capture every important point, example, and piece of information. Only "
        "include information explicitly stated in the transcript - do not add external "
        "information."
    ),
    template="""Create a detailed outline from the following transcript of "{title}".

Your outline should be comprehensive enough that someone reading it would get ALL the value from the video without needing to read the transcript.

Structure your outline like this:

## 1. [First Major Section/Topic]

**Main point:** [The core idea of this section in 1-2 sentences]

- [Key detail or sub-point]
  - [Supporting detail, example, or quote if relevant]
- [Key detail or sub-point]

## 2. [Second Major Section/Topic]

**Main point:** [The core idea of this section in 1-2 sentences]

- [Key detail or sub-point]

[Continue for all major sections...]

## Conclusion/Summary

[What the speaker concludes or the main takeaway]

---

Guidelines:
- Number each major section
- Include ALL significant points, examples, and explanations
- Use nested bullets for supporting details
- Capture specific examples, numbers, or quotes when mentioned
- Preserve the logical flow and structure of the content
- Be thorough - don't summarize, outline everything

TRANSCRIPT:
{transcript}""",
    max_tokens=4000,
)

PROMPTS: dict[OutputKind, PromptSpec] = {
    OutputKind.SUMMARY: SUMMARY_PROMPT,
    OutputKind.KEY_POINTS: KEY_POINTS_PROMPT,
    OutputKind.OUTLINE: OUTLINE_PROMPT,
}


def get_prompt(kind: OutputKind | str) -> PromptSpec:
    return PROMPTS[OutputKind(kind)]
