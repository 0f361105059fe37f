from database.card_dao import CardDAO
from models.card import Card
from utils.constants import MAX_CARD_NAME_LENGTH
from utils.errors import ConstraintViolation, NotFound
from utils.logger import get_logger
from utils.validation import require_text, require_amount, require_day

logger = get_logger(__name__)


class CardService:
    def __init__(self, card_dao: CardDAO):
        self._dao = card_dao

    def get_all(self) -> list[Card]:
        return self._dao.get_all()

    def get_by_id(self, card_id: int) -> Card:
        card = self._dao.get_by_id(card_id)
        if card is None:
            raise NotFound("Card", card_id)
        return card

    def create(self, name: str, limit_amount, closing_day: int, payment_day: int) -> Card:
        name, limit_amount = self._validate(name, limit_amount, closing_day, payment_day)
        if self._dao.get_by_name(name):
            raise ConstraintViolation(f"A card named '{name}' already exists.")
        return self._dao.create(name, limit_amount, closing_day, payment_day)

    def update(
        self, card_id: int, name: str, limit_amount, closing_day: int, payment_day: int
    ) -> Card:
        self.get_by_id(card_id)
        name, limit_amount = self._validate(name, limit_amount, closing_day, payment_day)
        existing = self._dao.get_by_name(name)
        if existing and existing.id != card_id:
            raise ConstraintViolation(f"A card named '{name}' already exists.")
        return self._dao.update(card_id, name, limit_amount, closing_day, payment_day)

    def delete(self, card_id: int, detach_expenses: bool = False):
        """Delete a card with its invoices and invoice notifications.

        Refused while expenses reference the card unless detach_expenses is set,
        in which case those expenses fall back to manual payment.
        """
        card = self.get_by_id(card_id)
        if self._dao.has_expenses(card_id) and not detach_expenses:
            raise ConstraintViolation(
                f"Cannot delete card '{card.name}': it has linked expenses. "
                "Move or remove those expenses first."
            )
        self._dao.delete_cascade(card_id)
        logger.info(f"Deleted card #{card_id} ({card.name})")

    @staticmethod
    def _validate(name, limit_amount, closing_day, payment_day):
        name = require_text(name, MAX_CARD_NAME_LENGTH, "Card name")
        limit_amount = require_amount(limit_amount, "Limit", allow_zero=True)
        require_day(closing_day, "Closing day")
        require_day(payment_day, "Payment day")
        if payment_day <= closing_day:
            raise ConstraintViolation("Payment day must be after the closing day.")
        return name, limit_amount
