"""
chatlens/patterns.py
Compiled matchers for the strings WhatsApp renders into its element tree.
Pure functions, no state.
"""

import re
from typing import Iterable, List, Optional, Pattern, Tuple

# "3:15 pm", "9:41am". Lower-case am/pm required; "15:42" is message text.
TIME_PATTERN = re.compile(r'\d{1,2}:\d{2}\s*[ap]m')

# "+91 93061 84110", "+1 555 1234"
PHONE_PATTERN = re.compile(r'\+\d{1,3} [\d ]+')

# Toolbar button description while a call is running
CALL_DESC_PATTERN = re.compile(
    r'WhatsApp voice call with (.*?) - (Incoming|Outgoing) call'
)

DIGITS = re.compile(r'\D+')

# Contact-title matchers that vary per installation (e.g. a shared
# "admissions" business number).
DEFAULT_CONTACT_PATTERNS = ('admissions',)


def is_time(text: str) -> bool:
    """True if the whole string is a time of day."""
    return bool(TIME_PATTERN.fullmatch((text or '').strip()))


def contains_time(text: str) -> bool:
    return bool(TIME_PATTERN.search(text or ''))


def is_phone(text: str) -> bool:
    """True if the whole string is an international phone number."""
    return bool(PHONE_PATTERN.fullmatch((text or '').strip()))


def find_phone(text: str) -> Optional[str]:
    """First phone number inside the string, trailing spaces trimmed."""
    m = PHONE_PATTERN.search(text or '')
    return m.group(0).strip() if m else None


def is_member_list(text: str) -> bool:
    """
    A comma-separated title holding a phone number ("+1 555 1234, Bob, Ann")
    is how WhatsApp titles a group whose members are not all saved contacts.
    """
    return ',' in (text or '') and find_phone(text) is not None


def parse_call_description(desc: str) -> Optional[Tuple[str, str]]:
    """(contact, direction) from an active-call button description, or None."""
    m = CALL_DESC_PATTERN.fullmatch((desc or '').strip())
    if not m:
        return None
    return m.group(1).strip(), m.group(2)


def extract_count(text: str) -> Optional[int]:
    """Digits of "12 unread messages" → 12. None when there are none."""
    digits = DIGITS.sub('', text or '')
    return int(digits) if digits else None


def compile_contact_patterns(patterns: Iterable[str]) -> List[Pattern]:
    """Installation-specific title matchers. Matched anywhere, case-insensitive."""
    return [re.compile(p, re.IGNORECASE) for p in patterns]


def matches_any(text: str, patterns: Iterable[Pattern]) -> bool:
    return any(p.search(text or '') for p in patterns)
