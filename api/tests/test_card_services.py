import pytest

from vocadeck.core.exceptions import ConflictError, NotFoundError, ValidationError
from vocadeck.core.record_store import SqlRecordStore
from vocadeck.models.card import Card
from vocadeck.models.card_progress import CardProgress
from vocadeck.models.learning_session import LearningSession
from vocadeck.models.user_card_stat import UserCardStat
from vocadeck.schemas.card import CardDraft
from vocadeck.services import card_service, card_set_service
from vocadeck.services.csv_service import CSV_HEADERS, decode_cards


def draft(front, back, **extra):
    return CardDraft(front_word=front, back_word=back, **extra)


@pytest.fixture
def cards(store, ctx, card_set):
    return [
        card_service.add_card(store, ctx, card_set.id, draft(f'front-{i}', f'back-{i}'))
        for i in range(3)
    ]


class TestCardSets:

    def test_create_strips_title(self, store, ctx):
        card_set = card_set_service.create_card_set(store, ctx, '  Verbs  ', '  ')

        assert card_set.title == 'Verbs'
        assert card_set.description is None
        assert card_set.user_id == ctx.user_id

    def test_create_requires_title(self, store, ctx):
        with pytest.raises(ValidationError):
            card_set_service.create_card_set(store, ctx, '   ')

    def test_list_is_per_user_with_counts(self, store, ctx, other_ctx, card_set, cards):
        second = card_set_service.create_card_set(store, ctx, 'Second')
        card_set_service.create_card_set(store, other_ctx, 'Not mine')

        summaries = card_set_service.list_card_sets(store, ctx)

        assert [s.card_set.id for s in summaries] == [second.id, card_set.id]
        assert [s.card_count for s in summaries] == [0, 3]
        assert all(s.last_accuracy is None for s in summaries)

    def test_list_reports_latest_completed_accuracy(self, store, ctx, card_set, cards, session_engine):
        for outcomes in ([True, True, True], [True, False, False]):
            session = session_engine.start(ctx, card_set.id, is_random_order=False)
            for card_id, outcome in zip(session.card_order, outcomes):
                session, _ = session_engine.answer(ctx, session.id, card_id, outcome)
        session_engine.start(ctx, card_set.id)

        summary = card_set_service.list_card_sets(store, ctx)[0]

        assert summary.last_accuracy == 33

    def test_other_users_set_looks_missing(self, store, other_ctx, card_set):
        with pytest.raises(NotFoundError):
            card_set_service.get_owned_card_set(store, other_ctx, card_set.id)
        with pytest.raises(NotFoundError):
            card_set_service.update_card_set(store, other_ctx, card_set.id, title='Mine now')

    def test_update_changes_only_given_fields(self, store, ctx, card_set):
        updated = card_set_service.update_card_set(store, ctx, card_set.id, title='Renamed')

        assert updated.title == 'Renamed'
        assert updated.description == 'First words'

    def test_delete_cascades_and_detaches_sessions(self, store, ctx, card_set, cards, session_engine):
        session = session_engine.start(ctx, card_set.id, is_random_order=False)
        session_engine.answer(ctx, session.id, session.card_order[0], True)

        counts = card_set_service.delete_card_set(store, ctx, card_set.id)

        assert counts == {
            'cards_deleted': 3,
            'stats_deleted': 1,
            'progress_deleted': 1,
            'sessions_detached': 1,
        }
        assert store.list(Card, {'card_set_id': card_set.id}) == []
        assert store.list(UserCardStat) == []
        assert store.list(CardProgress) == []
        assert store.get(LearningSession, session.id).card_set_id is None


class TestCards:

    def test_add_appends_with_gap(self, cards):
        assert [card.display_order for card in cards] == [1000, 2000, 3000]

    def test_list_in_deck_order(self, store, ctx, card_set, cards):
        card_service.move_card(store, ctx, cards[2].id, 0)

        listed = card_service.list_cards(store, ctx, card_set.id)

        assert [card.id for card in listed] == [cards[2].id, cards[0].id, cards[1].id]

    def test_update_only_touches_given_fields(self, store, ctx, cards):
        updated = card_service.update_card(
            store, ctx, cards[0].id, {'front_hint': '  hint ', 'back_description': '   '}
        )

        assert updated.front_hint == 'hint'
        assert updated.back_description is None
        assert updated.front_word == 'front-0'

    def test_update_cannot_blank_word(self, store, ctx, cards):
        with pytest.raises(ValidationError):
            card_service.update_card(store, ctx, cards[0].id, {'back_word': '  '})

    def test_delete_removes_stats_and_progress(self, store, ctx, card_set, cards, session_engine):
        session = session_engine.start(ctx, card_set.id, is_random_order=False)
        session_engine.answer(ctx, session.id, cards[0].id, False)

        counts = card_service.delete_card(store, ctx, cards[0].id)

        assert counts == {'stats_deleted': 1, 'progress_deleted': 1}
        assert store.get(Card, cards[0].id) is None
        assert card_service.get_review_stat(store, ctx, cards[1].id) is None

    def test_foreign_card_looks_missing(self, store, other_ctx, cards):
        with pytest.raises(NotFoundError):
            card_service.delete_card(store, other_ctx, cards[0].id)


class TestImportExport:

    def test_import_appends_after_existing_cards(self, store, ctx, card_set, cards):
        result = card_service.import_cards(
            store, ctx, card_set.id, [draft('x', 'X'), draft('y', 'Y')]
        )

        assert (result.imported, result.failed, result.errors) == (2, 0, [])
        assert [card.display_order for card in result.cards] == [4000, 5000]
        listed = card_service.list_cards(store, ctx, card_set.id)
        assert [card.front_word for card in listed][-2:] == ['x', 'y']

    def test_import_csv_reports_skipped_rows(self, store, ctx, card_set):
        text = '\n'.join([','.join(CSV_HEADERS), 'a,,,A,,', ',,,B,,', 'c,,,C,,'])

        result = card_service.import_csv(store, ctx, card_set.id, text)

        assert result.imported == 2
        assert [row.line_number for row in result.skipped_rows] == [3]

    def test_export_round_trips_deck(self, store, ctx, card_set):
        drafts = [
            draft('hello, world', 'こんにちは', front_hint='"greeting"'),
            draft('two\nlines', 'second', back_description='desc'),
        ]
        card_service.import_cards(store, ctx, card_set.id, drafts)

        exported = card_service.export_cards_csv(store, ctx, card_set.id)

        assert decode_cards(exported) == drafts


class RejectingStore(SqlRecordStore):
    """Store that refuses to insert cards with one particular front word."""

    def __init__(self, engine, rejected_word):
        super().__init__(engine)
        self.rejected_word = rejected_word

    def insert(self, record):
        if isinstance(record, Card) and record.front_word == self.rejected_word:
            raise ConflictError(f"card {record.front_word!r} rejected by store")
        return super().insert(record)


def test_partially_rejected_import_reports_counts(engine, ctx):
    store = RejectingStore(engine, rejected_word='y')
    card_set = card_set_service.create_card_set(store, ctx, 'Partial')

    result = card_service.import_cards(
        store, ctx, card_set.id, [draft('x', 'X'), draft('y', 'Y'), draft('z', 'Z')]
    )

    assert (result.imported, result.failed) == (2, 1)
    assert len(result.errors) == 1
    assert result.errors[0].startswith('Card #2 (y)')
    assert [card.display_order for card in result.cards] == [1000, 2000]
    listed = card_service.list_cards(store, ctx, card_set.id)
    assert [card.front_word for card in listed] == ['x', 'z']
