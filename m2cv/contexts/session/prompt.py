"""System prompt for interactive optimization sessions."""

from jinja2 import Environment, StrictUndefined

from m2cv.contexts.session.interactive_context import InteractiveContext
from m2cv.contexts.session.tools import WRITE_OPTIMIZED_RESUME

INTERACTIVE_PROMPT_TEMPLATE = """\
You are helping optimize a resume for a job application.

I've loaded:
- Application: {{ application_name }}

Your task:
1. Summarize the key requirements from the job description
2. Discuss optimization strategy with the user
3. When the user is satisfied, use the {{ tool_name }} tool to save the final version

{% if ats_mode %}
ATS OPTIMIZATION MODE:
- Use standard section headings (Summary, Experience, Skills, Education)
- Include relevant keywords from the job description
- Avoid tables, columns, and complex formatting
- Use standard bullet points
- Keep formatting simple and parseable

{% endif %}
---
BASE CV:
{{ base_cv }}

---
JOB DESCRIPTION:
{{ job_description }}

---
Please start by summarizing the key requirements from the job description."""

# Plain-text output: no autoescaping, undefined variables are errors
_env = Environment(
    undefined=StrictUndefined,
    trim_blocks=True,
    keep_trailing_newline=True,
    autoescape=False,
)
_template = _env.from_string(INTERACTIVE_PROMPT_TEMPLATE)


def render_session_prompt(application_name: str, context: InteractiveContext) -> str:
    """Render the system prompt handed to the agent alongside the session config."""
    return _template.render(
        application_name=application_name,
        tool_name=WRITE_OPTIMIZED_RESUME,
        ats_mode=context.ats_mode,
        base_cv=context.base_cv,
        job_description=context.job_description,
    )
