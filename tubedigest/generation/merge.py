"""Build the final merge prompt that recombines per-chunk outputs."""

from __future__ import annotations

from tubedigest.pipeline_config import OutputKind

MERGE_INSTRUCTIONS: dict[OutputKind, str] = {
    OutputKind.SUMMARY: (
        "Merge these partial summaries into a single cohesive summary. Eliminate redundancy, "
        "preserve all unique information, and maintain the structure "
        "(Overview, Main Points, Key Takeaways)."
    ),
    OutputKind.KEY_POINTS: (
        "Merge these partial key point extractions into a single cohesive list. Remove "
        "duplicates, preserve all unique facts and claims, and maintain the structure "
        "(Main Takeaways, Key Facts & Data, Core Arguments, Action Items)."
    ),
    OutputKind.OUTLINE: (
        "Merge these partial outlines into a single comprehensive outline. Combine numbered "
        "sections logically, remove redundancy from overlapping parts, and preserve all unique "
        "content. Re-number sections sequentially."
    ),
}

_PART_LABELS: dict[OutputKind, str] = {
    OutputKind.SUMMARY: "summaries",
    OutputKind.KEY_POINTS: "key point extractions",
    OutputKind.OUTLINE: "outlines",
}


def create_merge_prompt(
    chunk_outputs: list[str],
    video_title: str,
    output_kind: OutputKind | str,
) -> str:
    """Assemble the merge instruction document for the cross-chunk pass.

    Args:
        chunk_outputs: Per-chunk model outputs, in chunk order.
        video_title: Title shown to the model for context.
        output_kind: Which kind of document the chunks contain.

    Returns:
        Kind-specific instructions followed by every chunk output under a
        ``## Part N`` header, separated by horizontal rules.
    """
    kind = OutputKind(output_kind)
    sections = "\n\n---\n\n".join(
        f"## Part {i + 1}\n\n{output}" for i, output in enumerate(chunk_outputs)
    )

    return (
        f"You have received {len(chunk_outputs)} partial {_PART_LABELS[kind]} from a long video "
        f'titled "{video_title}".\n\n'
        f"{MERGE_INSTRUCTIONS[kind]}\n\n"
        "---\n\n"
        f"{sections}"
    )
