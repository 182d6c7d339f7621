"""Prompt templates for job posting extraction."""

from enum import Enum


class PromptSource(str, Enum):
    URL_HTML = "url_html"
    PASTED_TEXT = "pasted_text"


_FRAMING = {
    PromptSource.URL_HTML: "Analyze the following HTML content from a job posting webpage.",
    PromptSource.PASTED_TEXT: "Analyze the following text that was copied from a job posting webpage.",
}

_CONTENT_LABEL = {
    PromptSource.URL_HTML: "HTML SOURCE CODE",
    PromptSource.PASTED_TEXT: "JOB POSTING TEXT",
}

OUTPUT_KEYS = (
    "jobTitle",
    "companyName",
    "jobDescriptionText",
    "language",
    "location",
    "salary",
    "keyDetails",
    "jobPrerequisites",
    "notes",
)

_INSTRUCTIONS = """Your task is to extract specific details about the job posting.

INSTRUCTIONS:
1. Identify the main job title.
2. Identify the hiring company's name.
3. Extract the full job description text, focusing on responsibilities, qualifications, requirements, benefits, and any other relevant details. Return clean text without HTML tags.
4. Determine the primary language of the job posting. Use standard ISO 639-1 language codes (e.g. "en" for English, "de" for German, "es" for Spanish).
5. Extract the job location (e.g. "Remote", "Berlin", "Hybrid").
6. Extract any salary or compensation information provided.
7. Extract key highlights such as Employment Type, Experience Level, Remote Policy, Benefits, Tech Stack, Location and Salary as a list of key-value pairs in "keyDetails".
8. Extract the job prerequisites and requirements as a bulleted list: required skills, qualifications, years of experience, education, certifications, languages, and any "must-have" or "nice-to-have" items. This list MUST BE IN ENGLISH, even if the job posting is in another language. Translate it if necessary. Use • or - as bullet characters.
9. Leave "notes" null."""

_OUTPUT_FORMAT = """OUTPUT FORMAT:
Return ONLY a single JSON object enclosed in triple backticks (```json ... ```). The object MUST contain exactly these top-level keys: {keys}.
- jobTitle, companyName, language, location, salary, jobPrerequisites: strings if found, otherwise null.
- jobDescriptionText: string, REQUIRED.
- language: ISO 639-1 code string.
- keyDetails: array of {{"key": string, "value": string}} objects, or null.
- jobPrerequisites: bulleted list string, ALWAYS IN ENGLISH.
- notes: null.

Example:
```json
{{
  "jobTitle": "Software Engineer",
  "companyName": "Tech Corp",
  "jobDescriptionText": "...",
  "language": "en",
  "location": "Berlin / Hybrid",
  "salary": "€80k",
  "keyDetails": [
    {{"key": "Contract", "value": "Full-time"}},
    {{"key": "Experience", "value": "3+ years"}}
  ],
  "jobPrerequisites": "• 3+ years of experience in software development\\n• Proficiency in Java, JavaScript, or Python\\n• Nice to have: Experience with Kubernetes",
  "notes": null
}}
```"""


def build_extraction_prompt(content: str, source: PromptSource) -> str:
    """Embed ``content`` in the extraction instructions.

    Both sources share the same output contract; only the framing sentence
    and the content label differ.
    """
    output_format = _OUTPUT_FORMAT.format(keys=", ".join(f'"{k}"' for k in OUTPUT_KEYS))

    return f"""{_FRAMING[source]}
{_INSTRUCTIONS}

{output_format}

{_CONTENT_LABEL[source]}:
---
{content}
---"""


def build_url_prompt(cleaned_html: str) -> str:
    return build_extraction_prompt(cleaned_html, PromptSource.URL_HTML)


def build_text_prompt(text: str) -> str:
    return build_extraction_prompt(text, PromptSource.PASTED_TEXT)
