"""Prompt assembly for interview question generation."""

from __future__ import annotations

from collections.abc import Mapping

SYSTEM_PROMPT = """\
You write interview questions for recruiters setting up an AI-led interview.
Questions are specific to the job opening, open-ended, and answerable in a
few minutes of spoken conversation. You always answer with JSON only."""


def _job_block(job_title: str, plain_description: str) -> list[str]:
    return ["Job Title:", job_title, "Job Description:", plain_description]


def _dedupe_block(existing_questions: list[str]) -> list[str]:
    if not existing_questions:
        return []
    listing = "\n".join(f"  {i}. {q}" for i, q in enumerate(existing_questions, start=1))
    return [f"Do not generate questions that are already covered in this list:\n{listing}"]


def build_all_categories_prompt(
    job_title: str,
    plain_description: str,
    categories: Mapping[str, str],
    per_category: int,
    existing_questions: list[str],
    extra_instruction: str = "",
) -> str:
    """Prompt asking for ``per_category`` questions in every category."""
    sample = ",".join(f'"Question {i}"' for i in range(1, per_category + 1))
    segments = [
        f"Generate {per_category * len(categories)} interview questions for the following Job opening:",
        *_job_block(job_title, plain_description),
        "\n\n".join(
            f"Category:\n{name}\nCategory Description:\n{description}"
            for name, description in categories.items()
        ),
        ", ".join(f"{per_category} questions for {name}" for name in categories),
        *_dedupe_block(existing_questions),
    ]
    if extra_instruction:
        segments.append(extra_instruction)
    segments += [
        "Respond ONLY with valid JSON.",
        "Use this exact JSON schema:",
        f'[{{"category":"<category name>","questions":[{sample}]}}]',
        "The JSON array must contain one object per interview category listed above, "
        "using the same category names.",
        "Each object must list exactly the generated questions in the questions array.",
        f"Each questions array must contain exactly {per_category} items.",
        "Do not include any explanations, markdown fences, or surrounding text.",
    ]
    return "\n\n".join(segments)


def build_category_prompt(
    job_title: str,
    plain_description: str,
    category: str,
    category_description: str,
    per_category: int,
    existing_questions: list[str],
    extra_instruction: str = "",
) -> str:
    """Prompt asking for ``per_category`` questions in a single category."""
    sample = ",".join(f'"Question {i}"' for i in range(1, per_category + 1))
    segments = [
        f"Generate {per_category} interview questions for the following Job opening:",
        *_job_block(job_title, plain_description),
        "Interview Category:",
        category,
        "Interview Category Description:",
        category_description,
        f"The {per_category} interview questions should be related to the job description "
        "and follow the scope of the interview category.",
        *_dedupe_block(existing_questions),
    ]
    if extra_instruction:
        segments.append(extra_instruction)
    segments += [
        "Respond ONLY with valid JSON.",
        "Return an array containing a single object with this exact structure:",
        f'[{{"category":"{category}","questions":[{sample}]}}]',
        "Use the category value provided above verbatim.",
        f"Provide exactly {per_category} questions in the questions array.",
        "Do not include any explanations, markdown fences, or extra text.",
    ]
    return "\n\n".join(segments)
