"""Email template catalog and placeholder substitution."""

import logging
import re
import textwrap
from dataclasses import dataclass
from typing import Any

from models.entities import Envelope
from models.errors import ValidationError

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def _body(text: str) -> str:
    return textwrap.dedent(text).strip("\n")


EMAIL_TEMPLATES: dict[str, dict[str, str]] = {
    "INTERVIEW_SCHEDULED": {
        "subject": "Interview Scheduled: {{position}}",
        "body": _body("""
            Dear {{candidateName}},

            Your interview for {{position}} has been scheduled for {{date}} at {{time}}.

            Meeting Link: {{meetingLink}}
            Meeting ID: {{meetingId}}

            Best regards,
            HR Team
        """),
    },
    "THANK_YOU": {
        "subject": "Thank You for Applying to {{position}}",
        "body": _body("""
            Dear {{candidateName}},

            Thank you for applying to the {{position}} position at our company. We have received your application and our team is currently reviewing it.

            We appreciate your interest in joining our team.

            Best regards,
            HR Team
        """),
    },
    # The {{#if}} blocks are not evaluated; they reach the recipient as written.
    "FINAL_STATUS": {
        "subject": "Application Status for {{position}}",
        "body": _body("""
            Dear {{candidateName}},

            We have completed the review of your application for the {{position}} position.

            Status: {{status}}

            {{#if status === 'selected'}}
            Congratulations! You have been selected for the position. Our HR team will contact you with further details.
            {{/if}}

            {{#if status === 'rejected'}}
            We regret to inform you that you have not been selected for the position. We encourage you to apply for other opportunities in the future.
            {{/if}}

            {{#if status === 'onhold'}}
            Your application is currently on hold. We will update you on the next steps shortly.
            {{/if}}

            Best regards,
            HR Team
        """),
    },
    "INTERVIEW_ACCEPTED": {
        "subject": "Congratulations! Your Application Has Been Accepted",
        "body": _body("""
            Dear {{candidateName}},

            We are pleased to inform you that your application for the position of {{position}} has been accepted.

            We were impressed with your performance during the interview process and believe your skills and experience align well with what we're looking for.

            Our HR team will be in touch shortly with the next steps and additional details.

            Best regards,
            ATS Architects Team
        """),
    },
    "INTERVIEW_REJECTED": {
        "subject": "Update Regarding Your Application",
        "body": _body("""
            Dear {{candidateName}},

            Thank you for your interest in the {{position}} position and for taking the time to interview with us.

            After careful consideration, we regret to inform you that we have decided to move forward with other candidates whose qualifications more closely match our current needs.

            We appreciate your interest in ATS Architects and wish you the best in your future endeavors.

            Best regards,
            ATS Architects Team
        """),
    },
}


@dataclass
class RenderedEmail:
    """A fully rendered email for one recipient."""
    to_name: str
    to_email: str
    subject: str
    body: str


def format_template(template: str, variables: dict[str, Any]) -> str:
    """
    Substitute ``{{key}}`` placeholders with values from ``variables``.

    Placeholders without a matching key are left as they are. Values are
    inserted literally.
    """
    formatted = template
    for key, value in variables.items():
        replacement = "" if value is None else str(value)
        formatted = re.sub(
            r"\{\{" + re.escape(key) + r"\}\}",
            lambda _match: replacement,
            formatted,
        )
    return formatted


def unresolved_placeholders(text: str) -> list[str]:
    """Names of ``{{name}}`` placeholders still present in ``text``."""
    seen: list[str] = []
    for name in _PLACEHOLDER_RE.findall(text):
        if name not in seen:
            seen.append(name)
    return seen


def render_email(template_name: str, variables: dict[str, Any]) -> tuple[str, str]:
    """
    Render subject and body of a catalog template.

    Returns:
        (subject, body)

    Raises:
        ValidationError: if the template name is not in the catalog
    """
    template = EMAIL_TEMPLATES.get(template_name)
    if template is None:
        raise ValidationError(f"Unknown email template: {template_name}")

    subject = format_template(template["subject"], variables)
    body = format_template(template["body"], variables)

    missing = unresolved_placeholders(subject + "\n" + body)
    if missing:
        logger.debug("Template %s rendered with unresolved placeholders: %s", template_name, missing)
    return subject, body


def render_envelope(envelope: Envelope) -> list[RenderedEmail]:
    """
    Render one email per recipient of an envelope.

    The recipient name fills candidateName unless the envelope sets a
    non-empty one.
    """
    rendered = []
    for recipient in envelope.recipients:
        variables = dict(envelope.variables)
        if not variables.get("candidateName"):
            variables["candidateName"] = recipient.name
        subject, body = render_email(envelope.template_name, variables)
        rendered.append(RenderedEmail(
            to_name=recipient.name,
            to_email=recipient.email,
            subject=subject,
            body=body,
        ))
    return rendered
