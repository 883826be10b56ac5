"""
Pipeline Stage Service - stage/status vocabulary, derived predicates and
the optimistic board state used by the kanban view.

Stages are a fixed, ordered list but transitions are not guarded: any
stage can be set from any other stage. The W9, invoice and payment
statuses are independent closed sets that do not move with the stage.
"""
import copy
import logging
from collections import OrderedDict
from datetime import date
from typing import Callable, Dict, List, Optional

from influencer_os.extensions import db

logger = logging.getLogger(__name__)

PIPELINE_STAGES = (
    'contacted',
    'brief_sent',
    'content_received',
    'w9_done',
    'invoice_received',
    'paid',
    'posted',
)

STAGE_LABELS = {
    'contacted': 'Contacted',
    'brief_sent': 'Brief Sent',
    'content_received': 'Content Received',
    'w9_done': 'W9 Done',
    'invoice_received': 'Invoice Received',
    'paid': 'Paid',
    'posted': 'Posted',
}

W9_STATUSES = ('not_required', 'pending', 'sent', 'received', 'complete')
INVOICE_STATUSES = ('pending', 'sent', 'received', 'paid')
PAYMENT_STATUSES = ('unpaid', 'processing', 'paid')

STATUS_FIELDS = {
    'w9_status': W9_STATUSES,
    'invoice_status': INVOICE_STATUSES,
    'payment_status': PAYMENT_STATUSES,
}

# Stages still waiting on the influencer; late ones land on the chase list
EARLY_STAGES = ('contacted', 'brief_sent')
CONTENT_RECEIVED_STAGES = PIPELINE_STAGES[2:]
PAYMENT_QUEUE_STAGES = ('content_received', 'w9_done', 'invoice_received')


class InvalidStageError(ValueError):
    pass


class InvalidStatusError(ValueError):
    pass


class StageUpdateError(RuntimeError):
    """Raised when persisting a board move fails; the board has been reverted."""

    def __init__(self, card_id, stage, cause=None):
        super().__init__(f"Failed to update pipeline stage for {card_id} to {stage}: {cause}")
        self.card_id = card_id
        self.stage = stage
        self.cause = cause


def validate_stage(stage: str) -> str:
    if stage not in PIPELINE_STAGES:
        raise InvalidStageError(f"Pipeline stage must be one of: {', '.join(PIPELINE_STAGES)}")
    return stage


def validate_status(field: str, value: str) -> str:
    allowed = STATUS_FIELDS.get(field)
    if allowed is None:
        raise InvalidStatusError(f"Unknown status field: {field}")
    if value not in allowed:
        raise InvalidStatusError(f"{field} must be one of: {', '.join(allowed)}")
    return value


def stage_index(stage: str) -> int:
    return PIPELINE_STAGES.index(validate_stage(stage))


def is_ready_to_pay(w9_status: Optional[str], invoice_status: Optional[str]) -> bool:
    return w9_status == 'received' and invoice_status == 'received'


def is_overdue(stage: str, posting_deadline: Optional[date], today: Optional[date] = None) -> bool:
    if posting_deadline is None:
        return False
    today = today or date.today()
    return posting_deadline < today and stage in EARLY_STAGES


def is_content_received_or_later(stage: str) -> bool:
    return stage in CONTENT_RECEIVED_STAGES


def set_pipeline_stage(assignment, stage: str, commit: bool = True):
    """Single-row stage write. No version check, last write wins."""
    validate_stage(stage)
    previous = assignment.pipeline_stage
    assignment.pipeline_stage = stage
    if commit:
        db.session.commit()
    logger.info("Assignment %s moved %s -> %s", assignment.id, previous, stage)
    return assignment


def set_statuses(assignment, changes: Dict[str, str], commit: bool = True):
    for field, value in changes.items():
        validate_status(field, value)
    for field, value in changes.items():
        setattr(assignment, field, value)
    if commit:
        db.session.commit()
    logger.info("Assignment %s statuses updated: %s", assignment.id, changes)
    return assignment


def persist_stage(assignment_id: str, stage: str):
    """Persistence callback for PipelineBoard.drop backed by the database."""
    from influencer_os.models import CampaignInfluencer

    assignment = db.session.get(CampaignInfluencer, assignment_id)
    if assignment is None:
        raise LookupError(f"Assignment {assignment_id} not found")
    try:
        return set_pipeline_stage(assignment, stage)
    except Exception:
        db.session.rollback()
        raise


class PipelineBoard:
    """
    In-memory board state for one campaign.

    Cards are dicts keyed by ``campaign_influencer_id`` with a
    ``pipeline_stage``. ``snapshot`` is the last state acknowledged by the
    parent (i.e. the database); ``cards`` is the optimistic working copy
    shown while dragging.
    """

    key = 'campaign_influencer_id'

    def __init__(self, cards: List[dict]):
        self.active_id = None
        self.sync(cards)

    def sync(self, cards: List[dict]):
        self.snapshot = copy.deepcopy(list(cards))
        self.cards = copy.deepcopy(self.snapshot)

    def find(self, card_id: str, cards: Optional[List[dict]] = None) -> Optional[dict]:
        for card in self.cards if cards is None else cards:
            if card[self.key] == card_id:
                return card
        return None

    def columns(self) -> "OrderedDict[str, List[dict]]":
        grouped = OrderedDict((stage, []) for stage in PIPELINE_STAGES)
        for card in self.cards:
            if card['pipeline_stage'] in grouped:
                grouped[card['pipeline_stage']].append(card)
        return grouped

    def drag_start(self, card_id: str):
        self.active_id = card_id

    def drag_over(self, card_id: str, target_id: Optional[str]) -> bool:
        """Move the card into the hovered column. Returns True if it moved."""
        if target_id is None:
            return False
        card = self.find(card_id)
        if card is None:
            return False

        if target_id in PIPELINE_STAGES:
            card['pipeline_stage'] = target_id
            return True

        # Hovering over another card: inherit that card's column
        over = self.find(target_id)
        if over is not None and over is not card:
            card['pipeline_stage'] = over['pipeline_stage']
            return True
        return False

    def revert(self):
        self.cards = copy.deepcopy(self.snapshot)

    def drop(self, card_id: str, target_id: Optional[str], persist: Callable[[str, str], object]):
        """
        Finish a drag. Dropping outside any target cancels the move.
        Otherwise the card's current stage is written once through
        ``persist``; if that raises, the whole board goes back to the
        snapshot and StageUpdateError is raised.
        """
        self.active_id = None

        if target_id is None:
            self.revert()
            return None

        self.drag_over(card_id, target_id)
        card = self.find(card_id)
        if card is None:
            return None

        stage = card['pipeline_stage']
        try:
            persist(card_id, stage)
        except Exception as exc:
            logger.error("Failed to update pipeline stage for %s: %s", card_id, exc)
            self.revert()
            raise StageUpdateError(card_id, stage, exc) from exc

        acknowledged = self.find(card_id, self.snapshot)
        if acknowledged is not None:
            acknowledged['pipeline_stage'] = stage
        return stage
