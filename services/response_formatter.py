"""Markdown formatting of schedules and notifications for the UI."""

from typing import Callable, Dict, List, Optional

import pytz

from models.entities import Notification, ScheduleDay

_NOTIFICATION_ICONS = {
    "success": "✅",
    "warning": "⚠️",
    "error": "❌",
    "info": "ℹ️",
}


class ResponseFormatter:
    """Formats portal output in a consistent, structured manner."""

    @staticmethod
    def format_section(title: str, content: List[str], icon: str = "📋") -> str:
        """Format a section with title and content."""
        lines = [f"**{icon} {title}**", ""]
        lines.extend(content)
        return "\n".join(lines)

    @staticmethod
    def format_notification(notification: Notification) -> str:
        icon = _NOTIFICATION_ICONS.get(notification.level, "")
        return f"{icon} {notification.message}".strip()

    @staticmethod
    def format_schedule_day(
        day: ScheduleDay,
        candidate_name: Callable[[str], str],
        interviewer_name: Callable[[str], str],
        timezone: str = "UTC",
        overlaps: Optional[List[tuple]] = None
    ) -> str:
        """Format one day of a schedule as a markdown list."""
        tz = pytz.timezone(timezone)
        flagged = {index for pair in (overlaps or []) for index in pair}

        content = []
        for index, slot in enumerate(day.slots):
            start = slot.start_time.astimezone(tz).strftime("%I:%M %p")
            end = slot.end_time.astimezone(tz).strftime("%I:%M %p")
            line = (
                f"{index + 1}. {start} - {end} • **{candidate_name(slot.candidate_id)}** "
                f"with {interviewer_name(slot.interviewer_id)}"
            )
            if slot.join_url:
                line += f" ([join]({slot.join_url}))"
            if index in flagged:
                line += " ⚠️ overlaps"
            content.append(line)

        if not content:
            content.append("*No interviews*")

        title = f"{day.date.strftime('%A')}, {day.date.strftime('%B')} {day.date.day}, {day.date.year}"
        return ResponseFormatter.format_section(title, content, icon="📅")

    @staticmethod
    def format_unplaced(unplaced: List[str], candidate_name: Callable[[str], str]) -> str:
        """Format the candidates that did not fit into the schedule."""
        content = [f"• {candidate_name(candidate_id)}" for candidate_id in unplaced]
        content.append("")
        content.append("*Widen the date range or working hours and generate again to place them.*")
        return ResponseFormatter.format_section("Not Scheduled", content, icon="⚠️")

    @staticmethod
    def format_sent_email(email_record: Dict) -> str:
        """Display a recorded email."""
        sent_at = email_record.get("sent_at")
        response = "📧 **Email Content:**\n\n"
        response += f"**To:** {email_record.get('name', '')} <{email_record.get('to', '')}>\n\n"
        response += f"**Subject:** {email_record.get('subject', 'N/A')}\n\n"
        if sent_at:
            response += f"**Sent At:** {sent_at.strftime('%Y-%m-%d %H:%M:%S UTC')}\n\n"
        response += "**Email Body:**\n\n"
        response += "```\n"
        response += email_record.get("body", "")
        response += "\n```"
        return response
