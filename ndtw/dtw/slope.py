from ndtw.logging import get_logger, raise_if, raise_if_not

logger = get_logger(__name__)

Step = tuple[int, int]

DIAGONAL_STEP: Step = (1, 1)
X_STEP: Step = (1, 0)
Y_STEP: Step = (0, 1)


class SlopeConstraint:
    """
    Local slope constraint, which results in an Itakura parallelogram shaped admissible region.

    Besides single diagonal moves, a path may leave a cell through a "leap": up to `aside` consecutive moves along
    one axis followed by `diagonal` diagonal moves. A path therefore never makes more than `aside` consecutive moves
    in the same axis direction before being forced to advance `diagonal` steps diagonally.

    Parameters
    ----------
    diagonal
        Number of diagonal steps that must follow a run of side steps. Must be >= 1.
    aside
        Maximum number of consecutive side steps. Must be >= 0; with 0 only diagonal moves remain.
    """

    def __init__(self, diagonal: int, aside: int):
        for label, value in (("diagonal", diagonal), ("aside", aside)):
            raise_if(
                isinstance(value, bool) or int(value) != value,
                f"Slope constraint {label} step size must be an integer, received {value}.",
                logger,
            )
        raise_if_not(
            diagonal >= 1,
            "Diagonal slope constraint parameter must be greater than 0.",
            logger,
        )
        raise_if_not(
            aside >= 0,
            "Aside slope constraint parameter must be greater or equal to 0.",
            logger,
        )
        self.diagonal = int(diagonal)
        self.aside = int(aside)

        # index 0 is unused so that leaps can be addressed by their aside count
        self.x_leaps: list[tuple[Step, ...]] = [()]
        self.y_leaps: list[tuple[Step, ...]] = [()]
        for count in range(1, self.aside + 1):
            tail = (DIAGONAL_STEP,) * self.diagonal
            self.x_leaps.append((X_STEP,) * count + tail)
            self.y_leaps.append((Y_STEP,) * count + tail)

    @property
    def padding(self) -> int:
        """Width of the sentinel band appended to the matrices, the furthest reach of a leap along one axis."""
        return self.diagonal + self.aside

    def __eq__(self, other):
        return (
            isinstance(other, SlopeConstraint)
            and self.diagonal == other.diagonal
            and self.aside == other.aside
        )

    def __hash__(self):
        return hash((self.diagonal, self.aside))

    def __repr__(self):
        return f"SlopeConstraint(diagonal={self.diagonal}, aside={self.aside})"
