"""Unit tests for field normalizers."""
import re
from datetime import date

import pytest

from validation.errors import InvalidEmailError, InvalidFormatError, InvalidRangeError
from validation.normalizers import normalize_date, normalize_email, normalize_time, slugify


SAMPLE_TITLES = [
    'React Summit US 2025',
    "  Don't Miss: PyCon 2025!  ",
    'It’s “Live” at the Fillmore',
    '---Hello___World---',
    'Café & Croissants @ 9am',
    'x' * 300,
    'a' * 119 + ' bcd',
]


class TestSlugify:
    """Test cases for slug derivation."""

    def test_basic_title(self):
        """Test slug for a plain title."""
        assert slugify('React Summit US 2025') == 'react-summit-us-2025'

    def test_strips_straight_and_curly_quotes(self):
        """Test that quotes are removed rather than turned into hyphens."""
        assert slugify("Don't Stop") == 'dont-stop'
        assert slugify('It’s “Live”') == 'its-live'

    def test_collapses_runs_and_trims_hyphens(self):
        """Test runs of other characters become a single hyphen."""
        assert slugify('  --Hello,   World!!--  ') == 'hello-world'

    def test_truncates_to_120_characters(self):
        """Test long titles are truncated."""
        assert slugify('x' * 300) == 'x' * 120

    def test_truncation_does_not_leave_trailing_hyphen(self):
        """Test a cut landing on a separator is cleaned up."""
        assert slugify('a' * 119 + ' bcd') == 'a' * 119

    @pytest.mark.parametrize('title', SAMPLE_TITLES)
    def test_slug_shape_and_idempotence(self, title):
        """Test slug charset, bounds and idempotence."""
        slug = slugify(title)

        assert re.fullmatch(r'[a-z0-9-]*', slug)
        assert not slug.startswith('-')
        assert not slug.endswith('-')
        assert len(slug) <= 120
        assert slugify(slug) == slug

    def test_punctuation_only_title_gives_empty_slug(self):
        """Test that a title with no slug characters yields an empty slug."""
        assert slugify('!!!') == ''


class TestNormalizeDate:
    """Test cases for date normalization."""

    @pytest.mark.parametrize('value', [
        '2025-11-07',
        'November 7, 2025',
        '11/07/2025',
        'Nov 7, 2025',
        '2025/11/07',
        '  2025-11-07  ',
    ])
    def test_common_formats(self, value):
        """Test that common date formats normalize to ISO 8601."""
        assert normalize_date(value) == '2025-11-07'

    def test_offset_datetime_uses_utc_date(self):
        """Test that offset-aware input is converted to UTC first."""
        assert normalize_date('2025-11-07T23:30:00-05:00') == '2025-11-08'

    def test_zulu_datetime(self):
        """Test trailing Z is read as UTC."""
        assert normalize_date('2025-11-07T10:00:00Z') == '2025-11-07'

    def test_date_object(self):
        """Test date objects are accepted."""
        assert normalize_date(date(2025, 11, 7)) == '2025-11-07'

    def test_european_fallback(self):
        """Test day-first input when month-first cannot parse."""
        assert normalize_date('15/01/2024') == '2024-01-15'

    @pytest.mark.parametrize('value', ['not-a-date', '', '2025-13-45', None])
    def test_invalid_format(self, value):
        """Test unparsable dates raise InvalidFormatError."""
        with pytest.raises(InvalidFormatError) as exc_info:
            normalize_date(value)
        assert exc_info.value.field == 'date'


class TestNormalizeTime:
    """Test cases for time normalization."""

    @pytest.mark.parametrize('value, expected', [
        ('9:00 AM', '09:00'),
        ('9:00 PM', '21:00'),
        ('12:00 AM', '00:00'),
        ('12:00 PM', '12:00'),
        ('23:59', '23:59'),
        ('0:05', '00:05'),
        ('7:00PM', '19:00'),
        ('9:30 am', '09:30'),
        ('14:15:59', '14:15'),
        ('11:45:10 pm', '23:45'),
    ])
    def test_valid_times(self, value, expected):
        """Test valid times normalize to zero-padded 24-hour format."""
        assert normalize_time(value) == expected

    @pytest.mark.parametrize('value', ['25:00', '24:00', '10:60', '13:00 PM', '0:30 AM'])
    def test_out_of_range(self, value):
        """Test hour and minute bounds raise InvalidRangeError."""
        with pytest.raises(InvalidRangeError):
            normalize_time(value)

    @pytest.mark.parametrize('value', ['not-a-time', '', None, '9 AM', '9:0', '123:00', '٩:٣٠ PM', '１０:００'])
    def test_invalid_format(self, value):
        """Test unparsable times raise InvalidFormatError."""
        with pytest.raises(InvalidFormatError):
            normalize_time(value)


class TestNormalizeEmail:
    """Test cases for email normalization."""

    def test_trims_and_lower_cases(self):
        """Test email is trimmed and lower-cased."""
        assert normalize_email('  USER@Example.COM ') == 'user@example.com'

    @pytest.mark.parametrize('value', [
        'user@example',
        'userexample.com',
        'us er@example.com',
        '@example.com',
        '',
        None,
    ])
    def test_invalid_addresses(self, value):
        """Test malformed addresses raise InvalidEmailError."""
        with pytest.raises(InvalidEmailError):
            normalize_email(value)
