"""
tests/test_patterns.py
Pattern library: time, phone, member-list, call-description matchers.
"""

import pytest

from chatlens import patterns


class TestTimePattern:

    @pytest.mark.parametrize('text', ['3:15 pm', '9:41am', '12:00 am', ' 7:05 pm '])
    def test_times_match(self, text):
        assert patterns.is_time(text)

    @pytest.mark.parametrize('text', ['Hello', 'meet at 3:15 pm?', '+1 555 1234', '3 pm', '', '15:42', '10:30', '11:02 AM'])
    def test_non_times_rejected(self, text):
        assert not patterns.is_time(text)

    def test_contains_time_finds_embedded(self):
        assert patterns.contains_time('Yesterday, 9:41 pm')
        assert not patterns.contains_time('Yesterday')


class TestPhonePattern:

    def test_full_number(self):
        assert patterns.is_phone('+91 93061 84110')

    def test_number_inside_text_is_not_full_match(self):
        assert not patterns.is_phone('View +91 93061 84110 profile')
        assert patterns.find_phone('View +91 93061 84110 profile') == '+91 93061 84110'

    def test_no_plus_no_match(self):
        assert patterns.find_phone('555 1234') is None

    def test_member_list_needs_comma_and_phone(self):
        assert patterns.is_member_list('+1 555 1234, 5 members')
        assert patterns.is_member_list('Bob, +44 7700 900123')
        assert not patterns.is_member_list('+1 555 1234')
        assert not patterns.is_member_list('Bob, Alice')


class TestCallDescription:

    def test_parses_contact_and_direction(self):
        parsed = patterns.parse_call_description('WhatsApp voice call with Alice Smith - Outgoing call')
        assert parsed == ('Alice Smith', 'Outgoing')

    def test_unparseable_returns_none(self):
        assert patterns.parse_call_description('Start voice call') is None


class TestHelpers:

    def test_extract_count(self):
        assert patterns.extract_count('12 unread messages') == 12
        assert patterns.extract_count('unread messages') is None

    def test_contact_patterns_case_insensitive(self):
        compiled = patterns.compile_contact_patterns(['admissions'])
        assert patterns.matches_any('College Admissions Office', compiled)
        assert not patterns.matches_any('Alice', compiled)
