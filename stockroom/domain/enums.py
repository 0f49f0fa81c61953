"""Order status enum.

Statuses are loosely ordered: any value may follow any other. Only the
transition into CONFIRMED and the CONFIRMED -> CANCELLED transition move
stock (see ``stockroom.services.orders.reconciler``).
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle status.

    Values match the names so CSV files and JSON payloads can carry either.
    """

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def from_string(cls, value: str) -> "OrderStatus":
        """Convert text to OrderStatus, ignoring case and surrounding spaces.

        Raises:
            ValueError: If value is not a valid status
        """
        try:
            return cls(value.strip().upper())
        except ValueError:
            valid_values = ", ".join(s.value for s in cls)
            raise ValueError(
                f"Invalid order status: {value}. Valid values are: {valid_values}"
            )
