import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from datetime import datetime, timedelta
from constants import EMPTY_SLOT_TITLE, INITIAL_EVENT_TITLES, SLOT_COUNT
from errors import ValidationError
from slots import (
    Slot,
    apply_bulk_titles,
    build_links,
    generate_slots,
    parse_bulk_titles,
    slots_from_payload,
    submittable
)


def test_generate_default_day():
    slots = generate_slots('2025-01-10')

    assert len(slots) == SLOT_COUNT
    assert slots[0].start == '2025-01-10T05:00:00'
    assert slots[0].end == '2025-01-10T05:50:00'
    assert slots[-1].start == '2025-01-10T22:00:00'
    assert [slot.title for slot in slots] == INITIAL_EVENT_TITLES


@pytest.mark.parametrize('count,start_hour,duration', [(24, 0, 50), (1, 23, 45), (6, 9, 60), (18, 5, 120)])
def test_generate_end_is_start_plus_duration(count, start_hour, duration):
    slots = generate_slots('2024-02-29', count=count, start_hour=start_hour, duration=duration)

    assert len(slots) == count
    for slot in slots:
        start = datetime.strptime(slot.start, '%Y-%m-%dT%H:%M:%S')
        end = datetime.strptime(slot.end, '%Y-%m-%dT%H:%M:%S')
        assert end - start == timedelta(minutes=duration)
        assert slot.title


def test_generate_uses_placeholder_when_titles_run_out():
    slots = generate_slots('2025-01-10', count=24, start_hour=0)

    assert slots[len(INITIAL_EVENT_TITLES)].title == EMPTY_SLOT_TITLE
    assert slots[-1].title == EMPTY_SLOT_TITLE


def test_generate_blank_titles_become_placeholder_and_can_be_skipped():
    slots = generate_slots('2025-01-10', count=3, titles=['Math', '  ', 'Physics'])

    assert [slot.title for slot in slots] == ['Math', EMPTY_SLOT_TITLE, 'Physics']
    skipped = generate_slots('2025-01-10', count=3, titles=['Math', '', 'Physics'], skip_empty=True)
    assert [slot.start[11:13] for slot in skipped] == ['05', '07']


def test_generate_rejects_slots_past_midnight():
    with pytest.raises(ValidationError):
        generate_slots('2025-01-10', count=20, start_hour=5)


def test_generate_rejects_bad_date():
    with pytest.raises(ValidationError):
        generate_slots('2025-13-01')


def test_links_match_encode_uri_component():
    links = build_links('C++ (basics)')

    assert links['youtubeHindi'] == \
        'https://www.youtube.com/results?search_query=C%2B%2B%20(basics)%20in%20Hindi'
    assert links['youtubePlaylistEnglish'] == \
        'https://www.youtube.com/results?search_query=C%2B%2B%20(basics)%20playlist%20in%20English&sp=EgIQAw%3D%3D'


def test_slot_dict_shape():
    slot = Slot.from_dict({'start': '2025-01-10T05:00:00', 'end': '2025-01-10T05:50:00', 'title': 'Math'})

    data = slot.to_dict()
    assert set(data) == {
        'start', 'end', 'title', 'youtubeHindi', 'youtubeEnglish',
        'youtubePlaylistHindi', 'youtubePlaylistEnglish', 'timeZone'
    }
    assert data['youtubeHindi'].endswith('Math%20in%20Hindi')
    assert data['timeZone'] == 'Asia/Kolkata'


def test_from_dict_keeps_supplied_links():
    slot = Slot.from_dict({'title': 'Math', 'youtubeHindi': 'https://example.com/h'})

    assert slot.youtube_hindi == 'https://example.com/h'
    assert slot.youtube_english.endswith('Math%20in%20English')


def test_from_dict_rejects_non_object():
    with pytest.raises(ValidationError):
        Slot.from_dict('Math')


def test_submittable_drops_placeholders():
    slots = [Slot.for_title('', '', t) for t in ['Math', '', EMPTY_SLOT_TITLE, ' ', 'Art']]

    assert [slot.title for slot in submittable(slots)] == ['Math', 'Art']


def test_parse_bulk_truncates_to_count():
    raw = ', '.join(f'Topic{i} extra words' for i in range(30))

    titles = parse_bulk_titles(raw, 5)

    assert titles == ['Topic0 extra', 'Topic1 extra', 'Topic2 extra', 'Topic3 extra', 'Topic4 extra']


def test_parse_bulk_pads_with_fallback_titles():
    titles = parse_bulk_titles('Linear Algebra (MIT 18.06), , Calculus', 5)

    assert titles == ['Linear Algebra', 'Calculus', 'JavaScript', 'TypeScript', 'React']


def test_parse_bulk_pads_with_placeholder_beyond_fallbacks():
    titles = parse_bulk_titles('Math', 20)

    assert len(titles) == 20
    assert titles[0] == 'Math'
    assert titles[-1] == EMPTY_SLOT_TITLE


def test_parse_bulk_parentheses_only_item_keeps_its_slot():
    titles = parse_bulk_titles('(), Physics', 3)

    assert titles == ['', 'Physics', 'JavaScript']

    slots = apply_bulk_titles('(), Physics', '2025-01-10', count=3)
    assert slots[0].title == EMPTY_SLOT_TITLE
    assert (slots[1].title, slots[1].start) == ('Physics', '2025-01-10T06:00:00')


def test_parse_bulk_blank_items_do_not_take_a_slot():
    assert parse_bulk_titles('Math, , Art', 2) == ['Math', 'Art']


@pytest.mark.parametrize('raw', ['', '   ', None])
def test_parse_bulk_rejects_empty_input(raw):
    with pytest.raises(ValidationError, match='Please paste some data first'):
        parse_bulk_titles(raw, 5)


def test_apply_bulk_titles_builds_slots():
    slots = apply_bulk_titles('Math, Physics', '2025-01-10', count=3)

    assert [slot.title for slot in slots] == ['Math', 'Physics', 'JavaScript']
    assert slots[1].start == '2025-01-10T06:00:00'


def test_slots_from_payload_assigns_positional_hours():
    slots = slots_from_payload([{'title': 'Math'}, {'title': 'Art', 'start': '2025-01-01T09:00:00'}],
                               '2025-01-10')

    assert slots[0].start == '2025-01-10T05:00:00'
    assert slots[0].end == '2025-01-10T05:50:00'
    assert slots[1].start == '2025-01-01T09:00:00'
