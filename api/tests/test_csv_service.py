import pytest

from vocadeck.core.exceptions import EmptyInputError
from vocadeck.schemas.card import CardDraft, card_from_record
from vocadeck.services.csv_service import (
    BOM,
    CSV_HEADERS,
    decode_cards,
    decode_cards_with_report,
    encode_cards,
    escape_field,
    generate_template,
    parse_record,
    split_records,
)

HEADER = ','.join(CSV_HEADERS)


def test_escape_field_quotes_only_when_needed():
    assert escape_field('plain') == 'plain'
    assert escape_field('a,b') == '"a,b"'
    assert escape_field('say "hi"') == '"say ""hi"""'
    assert escape_field('two\nlines') == '"two\nlines"'


def test_encode_writes_bom_header_and_empty_optionals():
    text = encode_cards([CardDraft(front_word='cat', back_word='猫')])

    assert text.startswith(BOM)
    lines = text[len(BOM):].split('\n')
    assert lines[0] == HEADER
    assert lines[1] == 'cat,,,猫,,'


def test_round_trip_preserves_special_characters():
    drafts = [
        CardDraft(
            front_word='apple, red',
            front_hint='"fruit"',
            front_description='grows on trees\nand in shops',
            back_word='りんご',
            back_hint=None,
            back_description='果物',
        ),
        CardDraft(front_word='dog', back_word='犬', back_hint='inu'),
        CardDraft(front_word='a "quoted, comma"', back_word='x\ny'),
    ]

    assert decode_cards(encode_cards(drafts)) == drafts


def test_round_trip_of_empty_deck_is_header_only():
    text = encode_cards([])

    assert text == BOM + HEADER
    with pytest.raises(EmptyInputError):
        decode_cards(text)


def test_empty_input_raises():
    with pytest.raises(EmptyInputError):
        decode_cards('')
    with pytest.raises(EmptyInputError):
        decode_cards(HEADER + '\n\n')


def test_short_row_is_skipped():
    result = decode_cards_with_report(HEADER + '\nw1,,,\n')

    assert result.drafts == []
    assert len(result.skipped) == 1
    assert result.skipped[0].line_number == 2


def test_rows_without_words_are_skipped_and_rest_decoded():
    text = '\n'.join([
        HEADER,
        'one,,,uno,,',
        ',hint,,dos,,',
        'three,,,   ,,',
        'four,,,cuatro,,',
    ])

    result = decode_cards_with_report(text)

    assert [d.front_word for d in result.drafts] == ['one', 'four']
    assert [row.line_number for row in result.skipped] == [3, 4]


def test_crlf_and_blank_lines():
    text = HEADER + '\r\n\r\nA,a,,B,b,\r\n'

    drafts = decode_cards(text)

    assert drafts == [CardDraft(front_word='A', front_hint='a', back_word='B', back_hint='b')]


def test_extra_columns_are_ignored():
    drafts = decode_cards(HEADER + '\nA,,,B,,,extra,more')

    assert drafts == [CardDraft(front_word='A', back_word='B')]


def test_split_records_keeps_newlines_inside_quotes():
    records = split_records('a,b\n"x\ny",z\nlast')

    assert records == [(1, 'a,b'), (2, '"x\ny",z'), (4, 'last')]


def test_parse_record_unescapes_doubled_quotes():
    assert parse_record('"a ""b""",c,"d,e"') == ['a "b"', 'c', 'd,e']


def test_template_decodes_to_sample_cards():
    template = generate_template()

    assert template.startswith(BOM)
    drafts = decode_cards(template)
    assert [d.front_word for d in drafts] == ['Hello', 'Thank you', 'Good morning']
    assert drafts[0].back_word == 'こんにちは'
    assert generate_template() == template


class TestCardDraft:

    def test_strips_and_blanks_optional_fields(self):
        draft = CardDraft(front_word='  cat ', back_word='猫', front_hint='   ', back_description=' neko ')

        assert draft.front_word == 'cat'
        assert draft.front_hint is None
        assert draft.back_description == 'neko'

    def test_accepts_legacy_camel_case_records(self):
        draft = card_from_record({'frontWord': 'cat', 'backWord': '猫', 'backHint': 'neko'})

        assert draft == CardDraft(front_word='cat', back_word='猫', back_hint='neko')

    def test_rejects_blank_word(self):
        with pytest.raises(ValueError):
            CardDraft(front_word=' ', back_word='猫')


class TestStrayQuotes:

    def test_quote_inside_unquoted_field_is_literal(self):
        text = '\n'.join([
            HEADER,
            'monitor,27" screen,,モニター,,',
            'cat,,,猫,,',
            'dog,,,犬,,',
            'bird,,,鳥,,',
        ])

        result = decode_cards_with_report(text)

        assert [d.front_word for d in result.drafts] == ['monitor', 'cat', 'dog', 'bird']
        assert result.drafts[0].front_hint == '27" screen'
        assert result.skipped == []

    def test_rows_after_a_stray_quote_keep_their_line_numbers(self):
        text = '\n'.join([HEADER, 'a"b,,,A,,', ',,,B,,', 'c,,,C,,'])

        result = decode_cards_with_report(text)

        assert [d.front_word for d in result.drafts] == ['a"b', 'c']
        assert [row.line_number for row in result.skipped] == [3]

    def test_split_records_only_opens_quotes_at_field_start(self):
        assert split_records('x"y,z\nnext') == [(1, 'x"y,z'), (2, 'next')]
        assert split_records('a,"p\nq",r\nnext') == [(1, 'a,"p\nq",r'), (3, 'next')]

    def test_parse_record_keeps_mid_field_quote(self):
        assert parse_record('27" screen,"x, y",') == ['27" screen', 'x, y', '']
