"""Instruction descriptors built from operation plans.

A descriptor names the program, the instruction, the accounts it touches
and its arguments. It is the hand-off point to whatever signs and submits
transactions; nothing here talks to the network.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import BaseModel, Field

from planner.models.plan import (
    OperationKind,
    OperationPlan,
    RedeemOperation,
    SplitOperation,
    SwapOperation,
)

logger = structlog.get_logger()

CONDITIONAL_VAULT_PROGRAM = "conditional_vault"
AMM_PROGRAM = "amm"


class InstructionDescriptor(BaseModel):
    """One unsigned program instruction."""

    program: str
    name: str
    accounts: dict[str, str]
    args: dict[str, Any] = Field(default_factory=dict)


class DescriptorBuilder:
    """OperationBuilder producing InstructionDescriptors, one per operation."""

    def build(self, plan: OperationPlan, user: str) -> list[InstructionDescriptor]:
        instructions = [self._build_one(op, user) for op in plan.operations]
        logger.debug("instructions_built", user=user, kinds=[i.name for i in instructions])
        return instructions

    def _build_one(
        self, op: SplitOperation | SwapOperation | RedeemOperation, user: str
    ) -> InstructionDescriptor:
        if isinstance(op, SplitOperation):
            return self.split_tokens(op)
        if isinstance(op, SwapOperation):
            return self.swap(op)
        return self.redeem_tokens(op, payer=user)

    def split_tokens(self, op: SplitOperation) -> InstructionDescriptor:
        return InstructionDescriptor(
            program=CONDITIONAL_VAULT_PROGRAM,
            name="split_tokens",
            accounts={
                "question": op.question,
                "vault": op.vault,
                "underlyingTokenMint": op.underlying_mint,
                "authority": op.authority,
            },
            args={"amount": str(op.amount), "numOutcomes": op.num_outcomes},
        )

    def swap(self, op: SwapOperation) -> InstructionDescriptor:
        return InstructionDescriptor(
            program=AMM_PROGRAM,
            name="swap",
            accounts={
                "amm": op.amm,
                "baseMint": op.base_mint,
                "quoteMint": op.quote_mint,
                "user": op.user,
            },
            args={
                "swapType": op.direction.value,
                "inputAmount": str(op.input_amount),
                "outputAmountMin": str(op.min_output_amount),
            },
        )

    def redeem_tokens(self, op: RedeemOperation, payer: str) -> InstructionDescriptor:
        return InstructionDescriptor(
            program=CONDITIONAL_VAULT_PROGRAM,
            name="redeem_tokens",
            accounts={
                "question": op.question,
                "vault": op.vault,
                "underlyingTokenMint": op.underlying_mint,
                "user": op.user,
                "payer": payer,
            },
            args={
                "numOutcomes": op.num_outcomes,
                "leg": "base" if op.kind == OperationKind.REDEEM_BASE else "quote",
            },
        )


__all__ = ["InstructionDescriptor", "DescriptorBuilder"]
