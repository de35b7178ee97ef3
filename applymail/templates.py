from .models import ApplicationContext, GeneratedEmail


def fallback_subject(ctx: ApplicationContext) -> str:
    return f"Application for {ctx.job_role} – {ctx.name}"


def fallback_email(ctx: ApplicationContext) -> GeneratedEmail:
    """Formal business letter built only from the context. Same context, same output."""
    body = (
        f"Dear {ctx.hr_name},\n\n"
        f"I am writing to formally express my interest in the {ctx.job_role} position at {ctx.company}. "
        f"With a strong academic background in {ctx.education} and comprehensive experience in {ctx.skills}, "
        "I am eager to contribute to your esteemed organization and align my professional aspirations "
        "with your company’s values.\n\n"
        "Throughout my academic and project work, I have consistently demonstrated dedication, "
        "resourcefulness, and adaptability, attributes which I am confident will enable me to add value "
        "to your team. My technical proficiency and commitment to continuous improvement position me "
        "as a strong candidate for this role.\n\n"
        "I would appreciate the opportunity to further discuss my qualifications and how they align "
        "with your requirements. Thank you for considering my application. I look forward to the "
        f"possibility of contributing to {ctx.company}.\n\n"
        "Sincerely,\n"
        f"{ctx.name}\n"
        f"{ctx.location}\n"
        f"Email: {ctx.user_email}\n"
        f"Phone: {ctx.user_phone}"
    )
    return GeneratedEmail(subject=fallback_subject(ctx), body=body)
