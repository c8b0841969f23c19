"""
WhatsApp messaging via wa.me click-to-chat links.

Nothing is sent from the server: each generator returns the phone, the
rendered message and a ``https://wa.me/...`` link the front desk opens.

Templates are stored in ``StudioSettings.whatsapp_templates`` as a
versioned envelope. ``migrate_templates`` is the only place that knows
about older layouts:

    version 1 (no "schema_version" key, camelCase keys)
        {"renewalReminder": {...}, "classReminder": {...},
         "paymentConfirmation": {...}, "leadFollowUp": {...}}

    version 2 (current)
        {"schema_version": 2,
         "renewal_reminders": [...], "class_reminder": {...},
         "payment_confirmation": {...}, "payment_reminders": [...],
         "lead_follow_ups": [...], "lead_registration_link": {...},
         "general_notifications": [...]}
"""

import copy
import logging
import re
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from app.core.exceptions import BusinessRuleError
from app.utils.dates import days_between, format_date
from app.utils.formatting import format_amount, group_indian, normalize_phone

logger = logging.getLogger(__name__)


TEMPLATE_SCHEMA_VERSION = 2

OPT_OUT_FOOTER = "_This is an automated message. Reply STOP to opt-out._"


# =============================================================================
# DEFAULT TEMPLATES
# =============================================================================
#
# Placeholders are written {camelCase} and matched case-insensitively.

DEFAULT_TEMPLATES: Dict[str, Any] = {
    "schema_version": TEMPLATE_SCHEMA_VERSION,
    "renewal_reminders": [
        {
            "name": "With Discount Info",
            "template": (
                "Hi {memberName} Namaste\n\n"
                "This is a gentle reminder that your yoga membership is nearing expiry.\n\n"
                "Plan Amount: {payableAmount}\n"
                "Expiry Date: {expiryDate}\n"
                "Current Discount: {discountAmount}\n\n"
                "If you renew without any gap, you continue at the same plan amount "
                "and keep your existing discount.\n\n"
                "Warm regards,\n{studioName}\n\n" + OPT_OUT_FOOTER
            ),
        },
        {
            "name": "Simple Reminder",
            "template": (
                "Hi {memberName} Namaste\n\n"
                "This is a gentle reminder that your yoga membership is nearing expiry.\n\n"
                "Membership Amount: {payableAmount}\n"
                "Expiry Date: {expiryDate}\n\n"
                "Reply here if you'd like help with renewal.\n\n"
                "Warm regards,\n{studioName}\n\n" + OPT_OUT_FOOTER
            ),
        },
        {
            "name": "Urgent Reminder",
            "template": (
                "Hi {memberName}, your membership expires in just {daysRemaining} days "
                "({expiryDate}). Don't miss your yoga practice! Renew now to continue "
                "enjoying your classes. - {studioName}\n\n" + OPT_OUT_FOOTER
            ),
        },
    ],
    "class_reminder": {
        "name": "Class Reminder",
        "template": (
            "Hi {memberName}, reminder: Your yoga class is {classDate} at {classTime}. "
            "See you! - {studioName}\n\n" + OPT_OUT_FOOTER
        ),
    },
    "payment_confirmation": {
        "name": "Payment Confirmation",
        "template": (
            "Hi {memberName}, we received your payment of {amount} for {planName}. "
            "Thank you! - {studioName}\n\n" + OPT_OUT_FOOTER
        ),
    },
    "payment_reminders": [
        {
            "name": "Gentle Reminder",
            "template": (
                "Hi {memberName} Namaste\n\n"
                "This is a gentle reminder about your pending payment.\n\n"
                "Invoice: {invoiceNumber}\n"
                "Amount Due: Rs {balanceAmount}\n"
                "Due Date: {dueDate}\n\n"
                "You can pay via UPI, bank transfer, or cash at the studio.\n\n"
                "Warm regards,\n{studioName}\n\n" + OPT_OUT_FOOTER
            ),
        },
        {
            "name": "Follow-up Reminder",
            "template": (
                "Hi {memberName}, this is a follow-up regarding your pending payment of "
                "Rs {balanceAmount} (Invoice: {invoiceNumber}). Please clear the dues at "
                "your earliest convenience. - {studioName}\n\n" + OPT_OUT_FOOTER
            ),
        },
    ],
    "lead_follow_ups": [
        {
            "name": "Trial Invitation",
            "template": (
                "Hi {leadName}, thank you for your interest in {studioName}! We'd love to "
                "have you try a class. Would you like to book a free trial session? "
                "Call us at {studioPhone}.\n\n" + OPT_OUT_FOOTER
            ),
        },
        {
            "name": "Check-in Message",
            "template": (
                "Hi {leadName}, this is {studioName} checking in! We noticed you were "
                "interested in joining us. Do you have any questions about our yoga "
                "classes? Reply or call {studioPhone}.\n\n" + OPT_OUT_FOOTER
            ),
        },
    ],
    "lead_registration_link": {
        "name": "Registration Link",
        "template": (
            "Hi {leadName} Namaste\n\n"
            "Thank you for your interest in {studioName}!\n\n"
            "Please complete your registration here:\n{registrationLink}\n\n"
            "This link will expire in 7 days.\n\n"
            "Warm regards,\n{studioName}\n\n" + OPT_OUT_FOOTER
        ),
    },
    "general_notifications": [
        {
            "name": "Holiday Notification",
            "template": (
                "Hi {memberName} Namaste\n\n"
                "{studioName} will be closed for *{nextHolidayName}* on *{nextHolidayDate}*. "
                "Regular classes resume the next working day.\n\n"
                "Warm regards,\n{studioName}\n\n" + OPT_OUT_FOOTER
            ),
        },
        {
            "name": "Google Review Request",
            "template": (
                "Hi {memberName} Namaste\n\n"
                "We hope you're enjoying your yoga journey with us! Would you share your "
                "experience on Google?\n\n{googleReviewUrl}\n\n"
                "Warm regards,\n{studioName}\n\n" + OPT_OUT_FOOTER
            ),
        },
        {
            "name": "Welcome Message",
            "template": (
                "Hi {memberName} Namaste\n\n"
                "Welcome to {studioName}!\n\n"
                "Your session: *{slotName}*\n\n"
                "See you on the mat!\n\n"
                "Warm regards,\n{studioName}\n\n" + OPT_OUT_FOOTER
            ),
        },
    ],
}

LIST_GROUPS = ("renewal_reminders", "payment_reminders", "lead_follow_ups", "general_notifications")
SINGLE_GROUPS = ("class_reminder", "payment_confirmation", "lead_registration_link")

# Version 1 key -> (version 2 key, was a single object)
_V1_KEYS = {
    "renewalReminder": ("renewal_reminders", True),
    "renewalReminders": ("renewal_reminders", False),
    "classReminder": ("class_reminder", False),
    "paymentConfirmation": ("payment_confirmation", False),
    "paymentReminders": ("payment_reminders", False),
    "leadFollowUp": ("lead_follow_ups", True),
    "leadFollowUps": ("lead_follow_ups", False),
    "leadRegistrationLink": ("lead_registration_link", False),
    "generalNotifications": ("general_notifications", False),
}


def default_templates() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_TEMPLATES)


# =============================================================================
# SCHEMA MIGRATION
# =============================================================================

def detect_template_version(raw: Optional[Mapping]) -> int:
    """Explicit ``schema_version`` or 1 for the legacy layout."""
    if not raw:
        return TEMPLATE_SCHEMA_VERSION
    version = raw.get("schema_version", 1)
    if not isinstance(version, int):
        raise BusinessRuleError(f"Invalid WhatsApp template schema version: {version!r}")
    return version


def _migrate_v1_to_v2(raw: Mapping) -> Dict[str, Any]:
    migrated: Dict[str, Any] = {"schema_version": 2}
    for old_key, (new_key, wrap) in _V1_KEYS.items():
        value = raw.get(old_key)
        if not value:
            continue
        if wrap:
            value = [value]
        # The plural key wins over the legacy single object
        if new_key in migrated and not wrap:
            migrated[new_key] = value
        else:
            migrated.setdefault(new_key, value)
    return migrated


def _fill_missing_groups(templates: Dict[str, Any]) -> Dict[str, Any]:
    defaults = DEFAULT_TEMPLATES
    for key in LIST_GROUPS:
        if not isinstance(templates.get(key), list) or not templates[key]:
            templates[key] = copy.deepcopy(defaults[key])
    for key in SINGLE_GROUPS:
        if not isinstance(templates.get(key), dict) or not templates[key].get("template"):
            templates[key] = copy.deepcopy(defaults[key])
    templates["schema_version"] = TEMPLATE_SCHEMA_VERSION
    return templates


def migrate_templates(raw: Optional[Mapping]) -> Dict[str, Any]:
    """
    Bring stored templates to the current schema.

    Idempotent: a version 2 envelope only gets its missing groups filled.

    Raises:
        BusinessRuleError: if the envelope comes from a newer schema
    """
    version = detect_template_version(raw)

    if version > TEMPLATE_SCHEMA_VERSION:
        raise BusinessRuleError(
            f"WhatsApp templates use schema version {version}, "
            f"this server supports up to {TEMPLATE_SCHEMA_VERSION}"
        )

    if not raw:
        return default_templates()

    if version == 1:
        logger.info("🔄 Migrating WhatsApp templates from schema v1 to v2")
        templates = _migrate_v1_to_v2(raw)
    else:
        templates = copy.deepcopy(dict(raw))

    return _fill_missing_groups(templates)


# =============================================================================
# RENDERING
# =============================================================================

def format_message(template: str, placeholders: Mapping[str, Any]) -> str:
    """
    Replace each ``{key}`` of ``placeholders`` in the template.

    Keys match case-insensitively. A None value renders as an empty string.

    Example:
        >>> format_message("Hi {MemberName}", {"memberName": "Asha"})
        'Hi Asha'
    """
    message = template
    for key, value in placeholders.items():
        pattern = re.compile(r"\{" + re.escape(key) + r"\}", re.IGNORECASE)
        replacement = "" if value is None else str(value)
        message = pattern.sub(lambda _: replacement, message)
    return message


def whatsapp_link(phone: str, message: str, country_code: str = "91") -> str:
    """
    Click-to-chat link with a pre-filled message.

    Example:
        >>> whatsapp_link("98765 43210", "Hi there")
        'https://wa.me/919876543210?text=Hi%20there'
    """
    digits = normalize_phone(phone, country_code)
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"


def _pick(templates: List[Mapping], index: int) -> Mapping:
    """Template at ``index``, clamped to the available range."""
    if not templates:
        raise BusinessRuleError("No WhatsApp template configured")
    return templates[max(0, min(index, len(templates) - 1))]


def _studio_placeholders(studio) -> Dict[str, str]:
    return {
        "studioName": studio.studio_name or "Yoga Studio",
        "studioPhone": studio.phone or "",
        "studioWebsite": studio.website or "",
    }


def _result(phone: str, message: str, country_code: str) -> Dict[str, str]:
    return {
        "phone": phone,
        "message": message,
        "link": whatsapp_link(phone, message, country_code),
    }


# =============================================================================
# MESSAGE GENERATORS
# =============================================================================

class WhatsAppService:
    """
    Builds WhatsApp messages from the studio templates.

    Args:
        studio: Loaded studio settings (``StudioSettingsData``)
        country_code: Prefix added to local numbers
        today: Reference date for day counts
    """

    def __init__(self, studio, country_code: str = "91", today: Optional[date] = None):
        self.studio = studio
        self.templates = migrate_templates(studio.whatsapp_templates)
        self.country_code = country_code
        self.today = today or date.today()

    def list_templates(self, group: str) -> List[Mapping]:
        if group not in LIST_GROUPS:
            raise BusinessRuleError(f"Unknown template group: {group}")
        return self.templates[group]

    def renewal_reminder(self, member, subscription, plan, template_index: int = 0, active_plans=()) -> Dict[str, str]:
        original = Decimal(subscription.original_amount or 0)
        discount = Decimal(subscription.discount_amount or 0)
        discount_percent = round(discount / original * 100) if original > 0 else 0

        monthly = next((p for p in active_plans if p.type == "monthly"), None)
        quarterly = next((p for p in active_plans if p.type == "quarterly"), None)

        placeholders = {
            "memberName": member.full_name,
            "memberFirstName": member.first_name,
            "memberPhone": member.phone,
            "memberEmail": member.email,
            "planName": plan.name,
            "startDate": format_date(subscription.start_date),
            "expiryDate": format_date(subscription.end_date),
            "daysRemaining": str(days_between(self.today, subscription.end_date)),
            "discountAmount": format_amount(discount),
            "payableAmount": format_amount(subscription.payable_amount),
            "currentDiscount": format_amount(discount),
            "discountPercent": f"{discount_percent}%",
            "monthlyPlanPrice": format_amount(monthly.price) if monthly else "N/A",
            "quarterlyPlanPrice": format_amount(quarterly.price) if quarterly else "N/A",
            **_studio_placeholders(self.studio),
        }
        template = _pick(self.templates["renewal_reminders"], template_index)
        message = format_message(template["template"], placeholders)
        return _result(member.contact_number, message, self.country_code)

    def class_reminder(self, member, slot, class_date: str) -> Dict[str, str]:
        placeholders = {
            "memberName": member.full_name,
            "memberFirstName": member.first_name,
            "classTime": slot.start_time,
            "slotName": slot.display_name,
            "classDate": class_date,
            **_studio_placeholders(self.studio),
        }
        message = format_message(self.templates["class_reminder"]["template"], placeholders)
        return _result(member.contact_number, message, self.country_code)

    def payment_confirmation(self, member, payment, invoice, plan_name: str, subscription=None) -> Dict[str, str]:
        placeholders = {
            "memberName": member.full_name,
            "memberFirstName": member.first_name,
            "amount": format_amount(payment.amount),
            "paymentDate": format_date(payment.payment_date),
            "invoiceNumber": invoice.invoice_number,
            "planName": plan_name,
            "membershipStartDate": format_date(subscription.start_date) if subscription else "",
            "membershipEndDate": format_date(subscription.end_date) if subscription else "",
            **_studio_placeholders(self.studio),
        }
        message = format_message(self.templates["payment_confirmation"]["template"], placeholders)
        return _result(member.contact_number, message, self.country_code)

    def payment_reminder(self, member, invoice, template_index: int = 0) -> Dict[str, str]:
        balance = invoice.balance_due
        placeholders = {
            "memberName": member.full_name,
            "memberFirstName": member.first_name,
            # Templates carry their own currency prefix
            "balanceAmount": group_indian(str(int(balance))),
            "pendingAmount": format_amount(balance),
            "invoiceNumber": invoice.invoice_number,
            "invoiceAmount": format_amount(invoice.total_amount),
            "dueDate": format_date(invoice.due_date),
            **_studio_placeholders(self.studio),
        }
        template = _pick(self.templates["payment_reminders"], template_index)
        message = format_message(template["template"], placeholders)
        return _result(member.contact_number, message, self.country_code)

    def lead_follow_up(self, lead, template_index: int = 0) -> Dict[str, str]:
        placeholders = {
            "leadName": lead.full_name,
            "leadPhone": lead.phone,
            **_studio_placeholders(self.studio),
        }
        template = _pick(self.templates["lead_follow_ups"], template_index)
        message = format_message(template["template"], placeholders)
        return _result(lead.contact_number, message, self.country_code)

    def lead_registration_link(self, lead, registration_link: str) -> Dict[str, str]:
        placeholders = {
            "leadName": lead.full_name,
            "leadPhone": lead.phone,
            "registrationLink": registration_link,
            **_studio_placeholders(self.studio),
        }
        message = format_message(self.templates["lead_registration_link"]["template"], placeholders)
        return _result(lead.contact_number, message, self.country_code)

    def general_notification(self, member, template_index: int = 0, extra: Optional[Mapping[str, Any]] = None) -> Dict[str, str]:
        holiday = self.next_holiday()
        placeholders = {
            "memberName": member.full_name,
            "memberFirstName": member.first_name,
            "nextHolidayName": holiday["name"] if holiday else "",
            "nextHolidayDate": format_date(holiday["date"]) if holiday else "",
            **_studio_placeholders(self.studio),
            **(extra or {}),
        }
        template = _pick(self.templates["general_notifications"], template_index)
        message = format_message(template["template"], placeholders)
        return _result(member.contact_number, message, self.country_code)

    def next_holiday(self) -> Optional[Dict[str, Any]]:
        """Closest holiday on or after today, recurring ones projected to this or next year."""
        upcoming = []
        for holiday in self.studio.holidays or []:
            value = str(holiday.get("date", ""))
            try:
                if holiday.get("recurring_yearly") or len(value) == 5:
                    month, day = (int(part) for part in value[-5:].split("-"))
                    candidate = date(self.today.year, month, day)
                    if candidate < self.today:
                        candidate = date(self.today.year + 1, month, day)
                else:
                    candidate = date.fromisoformat(value)
            except ValueError:
                logger.warning(f"⚠️ Ignoring malformed holiday date: {value!r}")
                continue
            if candidate >= self.today:
                upcoming.append({"name": holiday.get("name", ""), "date": candidate})
        return min(upcoming, key=lambda h: h["date"]) if upcoming else None
