"""
Prompt templates for every AI-backed feature of the assistant.

Structured prompts name the exact JSON keys declared in llm.schemas so the
extractor can recover them even when the model adds commentary.
"""

from enum import Enum
from typing import Dict


class AIPersona(str, Enum):
    SUBJECT_GUIDE = "Subject Guide"
    BIOSTATISTICIAN = "Biostatistician"
    ETHICS_TEACHER = "Ethics Teacher"
    COMMUNITY_MEDICINE_EXPERT = "Community Medicine Expert"


class Language(str, Enum):
    ENGLISH = "English"
    HINDI = "Hindi"
    MARATHI = "Marathi"
    MALAYALAM = "Malayalam"
    TAMIL = "Tamil"


PERSONA_PROMPTS: Dict[AIPersona, str] = {
    AIPersona.SUBJECT_GUIDE: (
        "You are a Subject Matter Expert and Guide for a post-graduate medical student. "
        "Review the following research draft. Provide constructive feedback on the scientific accuracy, "
        "clarity of concepts, and relevance to the field. Focus on the core subject matter. "
        "Be encouraging but critical. Structure your feedback into 'Strengths' and 'Areas for Improvement'."
    ),
    AIPersona.BIOSTATISTICIAN: (
        "You are an expert Biostatistician. Review the following research draft, paying close attention "
        "to the methodology, sample size calculation, statistical tests mentioned, and the presentation of data. "
        "Your feedback should be precise, technical, and focused solely on the statistical aspects. "
        "Identify any potential flaws or areas where the statistical approach could be strengthened."
    ),
    AIPersona.ETHICS_TEACHER: (
        "You are a Professor of Medical Ethics. Review this research draft from an ethical standpoint. "
        "Consider patient consent, data privacy, potential for bias, and the overall ethical conduct of the "
        "study as described. Your feedback should highlight any ethical concerns and suggest best practices."
    ),
    AIPersona.COMMUNITY_MEDICINE_EXPERT: (
        "You are an expert in Community Medicine and Public Health. Review this research draft for its "
        "public health relevance, feasibility in a real-world community setting, and potential impact. "
        "Comment on the study's design from a practical, population-based perspective."
    ),
}


def project_details_prompt(title: str) -> str:
    return (
        f'Based on the research project title "{title}", generate a concise set of primary and secondary '
        "research questions, and a primary and secondary hypothesis. Respond with ONLY a JSON object in the "
        'following format: { "primaryQuestions": "...", "secondaryQuestions": "...", '
        '"primaryHypothesis": "...", "secondaryHypothesis": "..." }'
    )


def hypothesis_prompt(title: str, questions: str) -> str:
    return (
        f'Based on the research title "{title}" and primary questions "{questions}", suggest a primary and '
        'secondary hypothesis. Respond with ONLY a JSON object in the format: '
        '{ "primary": "...", "secondary": "..." }'
    )


def study_design_prompt(title: str, questions: str) -> str:
    return (
        f'Based on the research title "{title}" and primary questions "{questions}", suggest a suitable '
        "Study Design, a brief justification for it, a calculated Sample Size with assumptions, and an "
        "estimated Study Duration. Respond with ONLY a JSON object in the format: "
        '{ "design": "...", "justification": "...", "sampleSize": "...", "duration": "..." }'
    )


def literature_search_prompt(query: str) -> str:
    return (
        f'As a research assistant, find relevant academic papers and articles for the query: "{query}". '
        "Provide a concise summary of the findings from the top sources. After the summary, list the key "
        'themes and three related search queries as JSON: { "keyThemes": ["..."], "relatedQueries": ["..."] }'
    )


def methodology_review_prompt(project_context: str, methodology: str) -> str:
    return f"""As an expert research methodologist, please review the following study design.

Project Context: {project_context}

Proposed Methodology: {methodology}

Provide constructive feedback on the chosen study type, inclusion/exclusion criteria, and variables. Check for consistency, potential biases, and suggest improvements. Structure your feedback into 'Strengths' and 'Areas for Improvement'."""


def title_abstract_prompt(draft: str) -> str:
    return (
        "Based on the following research draft, suggest a concise, informative title and a structured "
        "abstract (Background, Methods, Results, Conclusion) of at most 250 words. Respond with ONLY a JSON "
        'object in the format: { "title": "...", "abstract": "..." }\n\n'
        f"{draft}"
    )


def translation_prompt(text: str, language: Language) -> str:
    return (
        f"Translate the following text into {language.value}. Do not add any commentary, "
        f"just provide the translation.\n\n{text}"
    )


def t_test_interpretation_prompt(group1: str, group2: str, t: float, df: int) -> str:
    return (
        "You are a biostatistician explaining results to a post-graduate medical student. "
        f"An unpaired t-test compared Group 1 ({group1}) with Group 2 ({group2}). "
        f"The t-statistic is {t:.4f} with {df} degrees of freedom. "
        "In two or three sentences, explain what this result suggests about the difference between the "
        "group means, and remind the reader that an exact p-value should come from statistical software."
    )


def chi_square_interpretation_prompt(a: int, b: int, c: int, d: int, chi2: float) -> str:
    return (
        "You are a biostatistician explaining results to a post-graduate medical student. "
        "A chi-square test was run on this 2x2 table: "
        f"Group 1 (Outcome 1: {a}, Outcome 2: {b}); Group 2 (Outcome 1: {c}, Outcome 2: {d}). "
        f"The chi-square value is {chi2:.4f} with 1 degree of freedom (critical value 3.84 at p = 0.05). "
        "In two or three sentences, explain whether the groups and outcomes appear associated."
    )
