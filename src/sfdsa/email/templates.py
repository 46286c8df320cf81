"""
Email templates for the SF Deputy Sheriff recruitment platform.

All templates use inline CSS for maximum email client compatibility.
Branded with the Sheriff's Office green (#0A3C1F) and gold accents.

Each template function returns (subject, html_body, text_body).
User-supplied values are HTML-escaped before they reach the markup.
"""

from __future__ import annotations

from datetime import datetime, timezone
from html import escape

# Color constants
SFSD_GREEN = "#0A3C1F"
SFSD_GOLD = "#FFD700"
BG_LIGHT = "#F9F9F9"
TEXT_PRIMARY = "#333333"
TEXT_SECONDARY = "#666666"

ORG_NAME = "San Francisco Sheriff's Department"

REFERRAL_BENEFITS = [
    "Competitive starting salary ($70,000 - $90,000)",
    "Excellent health and dental benefits",
    "Comprehensive paid training program",
    "Retirement benefits (CalPERS)",
    "Career advancement opportunities",
    "Meaningful work serving our community",
]


def _base_layout(content: str, contact_email: str) -> str:
    """Wrap content in the base email layout."""
    year = datetime.now(timezone.utc).year
    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{ORG_NAME}</title>
</head>
<body style="margin: 0; padding: 0; font-family: Arial, sans-serif; line-height: 1.6; color: {TEXT_PRIMARY};">
    <table role="presentation" cellspacing="0" cellpadding="0" border="0" width="100%">
        <tr>
            <td align="center" style="padding: 20px;">
                <table role="presentation" cellspacing="0" cellpadding="0" border="0" width="600" style="max-width: 600px; width: 100%;">
                    <tr>
                        <td align="center" style="background-color: {SFSD_GREEN}; color: #FFFFFF; padding: 20px;">
                            <h1 style="margin: 0; font-size: 24px;">{ORG_NAME}</h1>
                        </td>
                    </tr>
                    <tr>
                        <td style="background-color: {BG_LIGHT}; padding: 20px;">
                            {content}
                        </td>
                    </tr>
                    <tr>
                        <td align="center" style="padding: 20px;">
                            <p style="color: {TEXT_SECONDARY}; font-size: 12px; margin: 0;">
                                This email was sent by the {ORG_NAME} Volunteer Recruitment Program.<br>
                                If you have any questions, please contact us at {escape(contact_email)}<br>
                                &copy; {year} {ORG_NAME}. All rights reserved.
                            </p>
                        </td>
                    </tr>
                </table>
            </td>
        </tr>
    </table>
</body>
</html>"""


def _button(url: str, label: str) -> str:
    """Render a green CTA button."""
    return f"""\
<div style="text-align: center; margin-top: 30px;">
    <a href="{escape(url, quote=True)}" target="_blank" style="display: inline-block; background-color: {SFSD_GREEN}; color: #FFFFFF; text-decoration: none; padding: 10px 20px; border-radius: 4px; font-weight: bold;">
        {label}
    </a>
</div>"""


def referral_invitation(
    recipient_name: str | None,
    recruiter_name: str,
    message: str,
    referral_link: str,
    contact_email: str,
) -> tuple[str, str, str]:
    """
    Career invitation sent by a volunteer recruiter to a candidate.

    Args:
        recipient_name: Candidate's name (greeting falls back to "there").
        recruiter_name: Name signed at the bottom.
        message: Recruiter's personal note, quoted in the body.
        referral_link: Registration link carrying the referral code.
        contact_email: Recruitment office address for the footer.
    """
    subject = f"{ORG_NAME} - Career Opportunity"
    greeting = escape(recipient_name) if recipient_name else "there"
    benefits = "".join(f"<li>{b}</li>" for b in REFERRAL_BENEFITS)

    content = f"""\
<p>Hello {greeting},</p>
<p>My name is {escape(recruiter_name)} and I'm a volunteer recruiter with the {ORG_NAME}. I'm reaching out because I believe you would be an excellent candidate for our team.</p>
<div style="border-left: 4px solid {SFSD_GREEN}; padding-left: 15px; margin: 20px 0; font-style: italic;">
    {escape(message)}
</div>
<p>Some of the benefits of joining the {ORG_NAME} include:</p>
<ul>{benefits}</ul>
<p>I'd be happy to answer any questions you might have or connect you with a recruiter who can provide more detailed information.</p>
{_button(referral_link, "Learn More About Joining SFSD")}
<p style="margin-top: 30px;">Thank you for your time and consideration.</p>
<p>Best regards,<br>{escape(recruiter_name)}<br>Volunteer Recruiter<br>{ORG_NAME}</p>"""

    text_benefits = "\n".join(f"- {b}" for b in REFERRAL_BENEFITS)
    text = f"""\
Hello {recipient_name or "there"},

My name is {recruiter_name} and I'm a volunteer recruiter with the {ORG_NAME}. I'm reaching out because I believe you would be an excellent candidate for our team.

"{message}"

Some of the benefits of joining the {ORG_NAME} include:
{text_benefits}

Learn more: {referral_link}

Best regards,
{recruiter_name}
Volunteer Recruiter, {ORG_NAME}

Questions? Contact {contact_email}"""

    return subject, _base_layout(content, contact_email), text


def volunteer_application_received(
    first_name: str,
    application_id: str,
    contact_email: str,
) -> tuple[str, str, str]:
    """Confirmation sent to a volunteer recruiter applicant."""
    subject = "Your Volunteer Recruiter Application Has Been Received"
    content = f"""\
<p>Dear {escape(first_name)},</p>
<p>Thank you for applying to become a Volunteer Recruiter with the {ORG_NAME}.</p>
<p>Your application ID is <strong>{escape(application_id)}</strong>. Please keep it for your records.</p>
<p>Our team will review your application and contact you within 5-7 business days regarding next steps.</p>
<p>Best regards,<br>SFDSA Volunteer Recruitment Team</p>"""
    text = f"""\
Dear {first_name},

Thank you for applying to become a Volunteer Recruiter with the {ORG_NAME}.

Your application ID is {application_id}. Please keep it for your records.

Our team will review your application and contact you within 5-7 business days regarding next steps.

SFDSA Volunteer Recruitment Team"""
    return subject, _base_layout(content, contact_email), text


def volunteer_application_notice(application: dict[str, str], contact_email: str) -> tuple[str, str, str]:
    """Notice to the recruitment office that a new application arrived."""
    name = f"{application['first_name']} {application['last_name']}"
    subject = f"New Volunteer Recruiter Application: {name}"
    fields = [
        ("Application ID", application["application_id"]),
        ("Name", name),
        ("Email", application["email"]),
        ("Phone", application["phone"]),
        ("Availability", application["availability"]),
        ("Motivation", application["motivation"]),
    ]
    rows = "".join(
        f'<tr><td style="padding: 4px 8px; font-weight: bold;">{label}</td>'
        f'<td style="padding: 4px 8px;">{escape(value)}</td></tr>'
        for label, value in fields
    )
    content = f"""\
<p>A new volunteer recruiter application was submitted.</p>
<table role="presentation" cellspacing="0" cellpadding="0" border="0">{rows}</table>"""
    text = "New volunteer recruiter application\n\n" + "\n".join(f"{label}: {value}" for label, value in fields)
    return subject, _base_layout(content, contact_email), text
