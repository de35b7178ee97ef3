from .models import ApplicationContext

EXTRACTOR_SYSTEM = "You are an AI data extractor that outputs strict JSON only."

EMAIL_SYSTEM = (
    "You are a professional corporate HR communication assistant. "
    "Use formal, concise business English, no contractions, "
    "and return only valid JSON that conforms to the schema."
)


def build_extraction_prompt(raw_text: str) -> str:
    return f"""
From the following text, extract a concise JSON object with the keys:
{{
  "name": "<candidate name or 'Candidate'>",
  "jobRole": "<role if mentioned or 'Software Engineer'>",
  "company": "<company if mentioned or 'the company'>",
  "location": "<location if mentioned or 'India'>"
}}

Text:
\"\"\"{raw_text}\"\"\"
"""


def build_email_prompt(ctx: ApplicationContext) -> str:
    return f"""
Return only JSON with:
{{
  "subject": "Application for [Job Role] – [Name]",
  "body": "Full professional email content using \\n as new lines"
}}

Context:
- Applicant Name: {ctx.name}
- Applicant Email: {ctx.user_email}
- Applicant Phone: {ctx.user_phone}
- Applicant Location: {ctx.location}
- Applicant Education: {ctx.education}
- Applicant Skills: {ctx.skills}
- Job Role: {ctx.job_role}
- Company: {ctx.company}
- HR Name: {ctx.hr_name}
- HR Email: {ctx.hr_email}
- Company Phone: {ctx.company_phone}

Guidelines:
- Greeting: "Dear {ctx.hr_name},"
- Use 2–3 paragraphs: introduction/purpose, fit/skills, courteous closing.
- Keep subject under 90 characters; include role and name.
- Maintain a respectful, confident tone without exaggeration.
- Close with "Sincerely," and a signature block: name, location, email, phone.
"""
