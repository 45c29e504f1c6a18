"""Prompt templates for all agents in the essay writing workflow."""

from typing import List

from essay_writer.state.state import CitationStyle, GenerationRequest


REVIEW_AGENT_SYSTEM_PROMPT = """You are an expert essay reviewer. You assess essays for grammar, structure and substance and respond only with the JSON structure you are asked for."""


TWEAK_AGENT_SYSTEM_PROMPT = """You are an expert writing coach. You make targeted improvements to an essay based on feedback while preserving the author's content, voice and structure."""


def get_essay_prompt(request: GenerationRequest) -> str:
    """Generate prompt for the initial essay draft."""
    topic = request.topic
    word_count = request.word_count
    style = request.style

    prompt = (
        f'Write a comprehensive {style} essay on the topic: "{topic}". '
        f"The essay MUST be exactly {word_count} words long (this is critically important)."
    )

    if request.thesis:
        prompt += f' The central thesis should be: "{request.thesis}".'
    else:
        prompt += " Develop a strong thesis statement related to this topic."

    if request.arguments:
        quoted = ", ".join(f'"{arg}"' for arg in request.arguments)
        prompt += f" Include and develop the following key arguments: {quoted}."

    prompt += f"""

Requirements (strictly follow these):
- The essay MUST be {word_count} words in length
- Have clear headings and subheadings
- Have a clear introduction with a thesis statement
- Include well-developed body paragraphs with supporting evidence and examples
- End with a conclusion that synthesizes the main points
- Include citations for factual claims or quotes
- Be written in {style} style
- Include sufficient detail to fulfill the word count requirement
- Do NOT include placeholder text or meta commentary about the essay
- Do NOT include a works cited section or a word count at the end

Write a complete essay that is EXACTLY {word_count} words. Word count is critical."""
    return prompt


def get_extension_prompt(
    content: str,
    topic: str,
    thesis: str,
    target_word_count: int,
    current_word_count: int,
    style: str
) -> str:
    """Generate prompt asking the model to lengthen an essay that came back short."""
    words_needed = target_word_count - current_word_count
    thesis_line = f'\nThe essay argues the thesis: "{thesis}". Keep that thesis intact.\n' if thesis else ""

    return f"""I have an essay on the topic "{topic}" that is {current_word_count} words, but it needs to be {target_word_count} words.
{thesis_line}
Please extend this essay by adding approximately {words_needed} more words. The additions should:
1. Expand existing points with more evidence, examples, or deeper analysis
2. Add relevant new supporting points that strengthen the overall argument
3. Flow naturally with the existing text and maintain the {style} style
4. Keep the original structure intact including headings and subheadings
5. Focus on quality content that meaningfully enhances the essay
6. Add to each section of the essay to ensure a balanced extension

IMPORTANT INSTRUCTIONS:
- Return the COMPLETE essay with your additions seamlessly integrated, not just the new text
- Make sure the final essay is at least {target_word_count} words
- Do NOT include placeholder text or meta commentary about the essay
- Do NOT include a works cited section or a word count at the end

Original essay:
{content}
"""


def get_review_prompt(content: str, title: str = "") -> str:
    """Generate prompt for a structured essay review."""
    title_part = f' "{title}"' if title else ""
    return f"""Please review the following{title_part} essay and provide structured feedback:

ESSAY:
{content}

Please provide a detailed review in the following JSON format (and ONLY in this format):
{{
    "ratings": {{
        "grammar": [1-10 rating for grammar and mechanics],
        "structure": [1-10 rating for essay structure, organization, and flow],
        "substance": [1-10 rating for quality of arguments, evidence, and analysis],
        "overall": [1-10 overall rating]
    }},
    "suggestions": [
        "A specific suggestion for improvement",
        "Another specific suggestion"
    ]
}}

IMPORTANT INSTRUCTIONS:
1. Your response MUST be valid JSON that can be parsed directly.
2. Each rating should be an integer between 1-10, where 10 is excellent.
3. Provide 1-3 specific, actionable suggestions for improvement. Keep them short and to the point.
4. Do NOT include ANY explanatory text outside the JSON structure.
5. Do NOT use markdown, code blocks, or other formatting.
6. Simply return the raw JSON object."""


def get_tweak_prompt(content: str, feedback: str, title: str = "") -> str:
    """Generate prompt for revising an essay against user feedback."""
    title_part = f' titled "{title}"' if title else ""
    return f"""I need you to improve an essay{title_part} based on specific feedback while preserving most of the original content.

ORIGINAL ESSAY:
{content}

FEEDBACK TO ADDRESS:
{feedback}

TASK:
1. Make targeted improvements to address the feedback
2. Maintain as much of the original content as possible
3. Only modify what's necessary to address the feedback
4. Preserve the author's voice and style
5. Maintain the core arguments and structure

IMPORTANT INSTRUCTIONS:
1. Return ONLY the complete improved essay text
2. Do NOT include any explanations, summaries, or comments
3. Maintain the original formatting and structure
4. There should be no placeholder text or meta commentary"""


def get_works_cited_prompt(citations: List[str], style: CitationStyle, access_date: str) -> str:
    """Generate prompt for formatting citation URLs as a works cited section."""
    numbered = "\n".join(f"{index}. {citation}" for index, citation in enumerate(citations, start=1))
    return f"""Generate a properly formatted works cited section for the following sources in {style.value} format:
{numbered}

Requirements:
- Each entry must be formatted in {style.value} style
- Include all provided sources in the works cited section
- Use "{access_date}" as the access date for every source
- If you cannot determine a field (author, title, publication date, publisher), omit it rather than inventing it
- Do NOT include placeholder text (such as "Unknown Author") or meta commentary
- Return only the formatted works cited section"""
