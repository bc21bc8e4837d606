"""
Base generator infrastructure for master data generation.

Provides core functionality: run seed, reference time, per-record random
generators and foreign key resolution against completed stages.
"""

import logging
import random
from datetime import UTC, datetime

from varejo_datagen.config.models import GeneratorConfig
from varejo_datagen.shared.exceptions import StagePreconditionError
from varejo_datagen.shared.validators import ForeignKeyValidator

from ..utils import record_rng

logger = logging.getLogger(__name__)


class BaseGenerator:
    """
    Base class providing shared infrastructure for entity generation.

    Handles:
    - Seed resolution (configured or drawn from system entropy)
    - Reference time used by every date computation of a run
    - Foreign key lookups against registered parent stages
    """

    def __init__(
        self,
        config: GeneratorConfig,
        fk_validator: ForeignKeyValidator | None = None,
        reference_time: datetime | None = None,
    ):
        """
        Initialize base generator infrastructure.

        Args:
            config: Generator configuration containing volumes and seed
            fk_validator: Registry of completed parent stages (a fresh one when omitted)
            reference_time: Instant all generated dates are relative to (now when omitted)
        """
        self.config = config
        self.fk_validator = fk_validator or ForeignKeyValidator()
        self.reference_time = reference_time or datetime.now(UTC)

        if config.seed is None:
            self.seed = random.SystemRandom().randrange(2**32)
            logger.info(f"No seed configured, using random seed {self.seed}")
        else:
            self.seed = config.seed

    def rng_for(self, entity: str, index: int) -> random.Random:
        """Random generator dedicated to one record of an entity."""
        return record_rng(self.seed, entity, index)

    def _require_parent(self, parent: str, stage: str) -> None:
        if not self.fk_validator.is_registered(parent):
            raise StagePreconditionError(
                f"'{parent}' has not been generated",
                stage=stage,
                precondition=f"{parent} stage complete",
            )

    def _pick_parent(self, parent: str, rng: random.Random, stage: str) -> int:
        """Uniformly select an identifier of a completed parent stage."""
        self._require_parent(parent, stage)
        try:
            return self.fk_validator.random_id(parent, rng)
        except KeyError as e:
            raise StagePreconditionError(
                str(e), stage=stage, precondition=f"{parent} ids available"
            ) from e
