"""Prompt templates for the AI providers"""

DESCRIPTION_EXCERPT_CHARS = 1500
CHECKBOX_PROFILE_CHARS = 1000


def _job_context_section(job_context):
    if job_context is None or not (job_context.description or job_context.title):
        return ""
    return (
        "\nJOB CONTEXT:\n"
        f"- Job Title: {job_context.title or 'Unknown'}\n"
        f"- Company: {job_context.company or 'Unknown'}\n"
        f"- Job Description (excerpt): {(job_context.description or '')[:DESCRIPTION_EXCERPT_CHARS]}\n"
    )


def build_question_prompt(profile_summary, question, options=None, job_context=None):
    header = (
        "You are helping a candidate fill out a job application form.\n"
    )
    context = (
        f"\nCANDIDATE PROFILE:\n{profile_summary}\n"
        f"{_job_context_section(job_context)}"
        f"\nQUESTION: {question}\n"
    )

    if options:
        numbered = "\n".join(f"{i}. {option}" for i, option in enumerate(options, start=1))
        return (
            header
            + "Pick the single best answer from the options, based on the candidate's "
            "profile and the job.\n"
            + context
            + f"\nOPTIONS:\n{numbered}\n"
            "\nINSTRUCTIONS:\n"
            "- Reply with ONLY the exact text of one option.\n"
            "- Prefer the option that best reflects the candidate's qualifications for this job.\n"
            "- When unsure, pick the option most favorable to the candidate.\n"
            "- No explanation, no extra text."
        )

    return (
        header
        + "Answer the question briefly, based on the candidate's profile and the job.\n"
        + context
        + "\nINSTRUCTIONS:\n"
        "1. Years of experience or any other number: reply with the number only (e.g. \"3\").\n"
        "2. Yes/No questions: reply with only \"Yes\" or \"No\".\n"
        "3. Short answers: one sentence relevant to the job.\n"
        "4. Longer responses (cover letter, message): under 350 characters, relevant to the job.\n"
        "5. Never repeat the question.\n"
        "6. Stay professional and positive about the candidate.\n"
        "7. Highlight skills that matter for this specific job.\n"
        "8. Visa and work authorization: answer truthfully from the profile."
    )


def build_checkbox_prompt(user_info, label, job_context=None):
    parts = [
        "You are helping a job applicant decide whether to tick a checkbox on an application form.\n",
        f"\nAPPLICANT PROFILE:\n{(user_info or '')[:CHECKBOX_PROFILE_CHARS]}\n",
    ]
    if job_context is not None:
        parts.append(
            "\nJOB CONTEXT:\n"
            f"- Position: {job_context.title or 'Unknown'}\n"
            f"- Company: {job_context.company or 'Unknown'}\n"
        )
    parts.append(
        f"\nCHECKBOX STATEMENT:\n\"{label}\"\n"
        "\nShould this checkbox be checked for this applicant?\n"
        "\nRULES:\n"
        "- Statement confirms legal work authorization and the applicant has it: true\n"
        "- Statement says the applicant needs visa sponsorship: true only if they do\n"
        "- Statement says the applicant does NOT need sponsorship: false if they do need it\n"
        "- Agreeing to terms or conditions: true\n"
        "- Following the company: false\n"
        "- Only check boxes that are truthful for this applicant\n"
        "\nReply with exactly one word: true or false"
    )
    return "".join(parts)


def build_requirements_prompt(description):
    return (
        "Extract the skills and experience requirements from this job description.\n"
        "Reply with ONLY a JSON object in exactly this shape:\n"
        "{\n"
        '  "tech_stack": ["skill1", "skill2"],\n'
        '  "technical_skills": ["skill1", "skill2"],\n'
        '  "required_skills": ["skill1", "skill2"],\n'
        '  "nice_to_have": ["skill1", "skill2"],\n'
        '  "years_required": 0\n'
        "}\n"
        f"\nJOB DESCRIPTION:\n{description}"
    )
