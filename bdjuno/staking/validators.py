"""Validator handling of the staking module."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping

from bdjuno.addresses import AddressError, bech32_decode, bech32_encode
from bdjuno.events import Tx
from bdjuno.keybase import get_avatar_url
from bdjuno.models import Coin
from bdjuno.staking.delegations import (
    NOT_FOUND_CODE,
    DelegationsMixin,
    MsgBeginRedelegate,
    MsgDelegate,
    MsgUndelegate,
    StakingError,
)
from bdjuno.staking_types import (
    DO_NOT_MODIFY_DESC,
    Delegation,
    Description,
    Validator,
    ValidatorCommission,
    ValidatorDescription,
    ValidatorStatus,
    ValidatorVotingPower,
)

logger = logging.getLogger(__name__)

ACCOUNT_PREFIX = "cosmos"
CONS_PREFIX = "cosmosvalcons"

_KEY_NAMES = {"ed25519": "Ed25519", "secp256k1": "Secp256k1"}


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record[name]
    return getattr(record, name)


@dataclass(frozen=True)
class PubKey:
    """A public key of a given type."""

    type: str
    key: bytes

    def address(self) -> bytes:
        """Return the 20 bytes address derived from the key."""
        if self.type == "ed25519":
            return hashlib.sha256(self.key).digest()[:20]
        if self.type == "secp256k1":
            digest = hashlib.sha256(self.key).digest()
            try:
                return hashlib.new("ripemd160", digest).digest()
            except ValueError as err:
                raise ValueError("ripemd160 is not available on this system") from err
        raise ValueError(f"unsupported public key type: {self.type}")

    def cons_address(self) -> str:
        """Return the bech32 consensus address derived from the key."""
        return bech32_encode(CONS_PREFIX, self.address())

    def __str__(self) -> str:
        name = _KEY_NAMES.get(self.type, self.type.capitalize())
        return f"PubKey{name}{{{self.key.hex().upper()}}}"


@dataclass(frozen=True)
class Commission:
    """The commission rates of a validator."""

    rate: Decimal = Decimal(0)
    max_rate: Decimal = Decimal(0)
    max_change_rate: Decimal = Decimal(0)


@dataclass(frozen=True)
class StakingValidator:
    """A validator as returned by a node."""

    operator_address: str
    consensus_pubkey: PubKey | None
    jailed: bool = False
    status: int = 0
    tokens: int = 0
    delegator_shares: Decimal = Decimal(0)
    description: Description = field(default_factory=Description)
    commission: Commission = field(default_factory=Commission)
    min_self_delegation: int = 0


@dataclass(frozen=True)
class MsgCreateValidator:
    """A message creating a new validator."""

    description: Description
    commission: Commission
    min_self_delegation: int
    delegator_address: str
    validator_address: str
    pubkey: PubKey | None
    value: Coin


@dataclass(frozen=True)
class MsgEditValidator:
    """A message editing an existing validator."""

    validator_address: str
    description: Description | None = None
    commission_rate: Decimal | None = None
    min_self_delegation: int | None = None


def _consensus_pubkey(validator: StakingValidator) -> PubKey:
    if validator.consensus_pubkey is None:
        raise StakingError(
            f"error while getting validator consensus pub key: "
            f"no key for {validator.operator_address}"
        )
    return validator.consensus_pubkey


def _consensus_address(validator: StakingValidator) -> str:
    try:
        return _consensus_pubkey(validator).cons_address()
    except (ValueError, StakingError) as err:
        raise StakingError(f"error while getting validator consensus address: {err}") from err


def _self_delegate_address(operator_address: str) -> str:
    try:
        _, data = bech32_decode(operator_address)
    except AddressError as err:
        raise StakingError(f"invalid operator address {operator_address}: {err}") from err
    return bech32_encode(ACCOUNT_PREFIX, data)


class ValidatorsMixin(DelegationsMixin):
    """Validator operations; expects source, db, distr_module and slashing_module attributes."""

    slashing_module: Any
    avatar_lookup: Callable[[str], str] = staticmethod(get_avatar_url)

    def convert_validator(self, height: int, validator: StakingValidator) -> Validator:
        """Turn a node's validator into a Validator record at height."""
        cons_address = _consensus_address(validator)
        pub_key = _consensus_pubkey(validator)
        return Validator(
            cons_address=cons_address,
            operator=validator.operator_address,
            cons_pub_key=str(pub_key),
            self_delegate_address=_self_delegate_address(validator.operator_address),
            max_change_rate=validator.commission.max_change_rate,
            max_rate=validator.commission.max_rate,
            height=height,
        )

    def convert_validator_description(
        self, height: int, op_addr: str, description: Description
    ) -> ValidatorDescription:
        """Build a validator description, looking up the avatar of its identity."""
        if description.identity == DO_NOT_MODIFY_DESC:
            avatar_url = DO_NOT_MODIFY_DESC
        else:
            try:
                avatar_url = self.avatar_lookup(description.identity)
            except Exception:
                avatar_url = ""
        return ValidatorDescription(op_addr, description, avatar_url, height)

    def refresh_validator_infos(self, height: int, val_oper: str) -> None:
        """Store the data, description and commission of a validator at height."""
        staking_validator = self.source.get_validator(height, val_oper)
        try:
            validator = self.convert_validator(height, staking_validator)
        except StakingError as err:
            raise StakingError(f"error while converting validator: {err}") from err

        description = self.convert_validator_description(
            height, staking_validator.operator_address, staking_validator.description
        )
        self.db.save_validators_data([validator])
        self.db.save_validator_description(description)
        self.db.save_validator_commission(
            ValidatorCommission(
                staking_validator.operator_address,
                staking_validator.commission.rate,
                staking_validator.min_self_delegation,
                height,
            )
        )

    def get_validators_with_status(
        self, height: int, status: str
    ) -> tuple[list[StakingValidator], list[Validator]]:
        """Return the validators having status at height, raw and converted."""
        validators = list(self.source.get_validators_with_status(height, status))
        converted = []
        for validator in validators:
            try:
                converted.append(self.convert_validator(height, validator))
            except StakingError as err:
                raise StakingError(f"error while converting validator: {err}") from err
        return validators, converted

    def update_validators(self, height: int) -> list[StakingValidator]:
        """Store every validator present at height and return them."""
        logger.debug("updating validators at height %d", height)
        try:
            validators, converted = self.get_validators_with_status(height, "")
        except Exception as err:
            raise StakingError(f"error while getting validator: {err}") from err
        self.db.save_validators_data(converted)
        return validators

    def get_validators_statuses(
        self, height: int, validators: Iterable[StakingValidator]
    ) -> list[ValidatorStatus]:
        """Return the status of each validator at height."""
        statuses = []
        for validator in validators:
            cons_address = _consensus_address(validator)
            pub_key = _consensus_pubkey(validator)

            tombstoned = False
            try:
                tombstoned = self.slashing_module.get_signing_info(height, cons_address).tombstoned
            except Exception as err:
                if NOT_FOUND_CODE not in str(err):
                    raise StakingError(
                        f"error while getting validator signing info: {err}"
                    ) from err

            statuses.append(
                ValidatorStatus(
                    consensus_address=cons_address,
                    consensus_pub_key=str(pub_key),
                    status=int(validator.status),
                    jailed=validator.jailed,
                    tombstoned=tombstoned,
                    height=height,
                )
            )
        return statuses

    def get_validators_voting_powers(
        self, height: int, block_validators: Iterable[Any]
    ) -> list[ValidatorVotingPower]:
        """Return the voting powers of the known validators at height."""
        validators, _ = self.get_validators_with_status(height, "")
        powers_by_address = {
            bech32_encode(CONS_PREFIX, bytes(_field(block_validator, "address"))): int(
                _field(block_validator, "voting_power")
            )
            for block_validator in block_validators
        }

        voting_powers = []
        for validator in validators:
            cons_address = _consensus_address(validator)
            try:
                found = self.db.has_validator(cons_address)
            except Exception:
                found = False
            if not found:
                continue
            voting_powers.append(
                ValidatorVotingPower(cons_address, powers_by_address.get(cons_address, 0), height)
            )
        return voting_powers

    def store_validators_from_msg_create_validator(
        self, height: int, msg: MsgCreateValidator
    ) -> None:
        """Store every piece of data carried by a create-validator message."""
        if msg.pubkey is None:
            raise StakingError("error while unpacking pub key: no key in message")
        try:
            cons_address = msg.pubkey.cons_address()
        except ValueError as err:
            raise StakingError(f"error while unpacking pub key: {err}") from err

        try:
            avatar_url = self.avatar_lookup(msg.description.identity)
        except Exception as err:
            raise StakingError(f"error while getting Avatar URL: {err}") from err

        self.db.save_validator_data(
            Validator(
                cons_address=cons_address,
                operator=msg.validator_address,
                cons_pub_key=str(msg.pubkey),
                self_delegate_address=msg.delegator_address,
                max_change_rate=msg.commission.max_change_rate,
                max_rate=msg.commission.max_rate,
                height=height,
            )
        )
        self.db.save_validator_description(
            ValidatorDescription(msg.validator_address, msg.description, avatar_url, height)
        )
        self.db.save_delegations(
            [Delegation(msg.delegator_address, msg.validator_address, msg.value, height)]
        )
        self.db.save_validator_commission(
            ValidatorCommission(
                msg.validator_address, msg.commission.rate, msg.min_self_delegation, height
            )
        )

    def handle_msg(self, index: int, msg: Any, tx: Tx) -> None:
        """Handle a staking message contained at index inside a successful transaction."""
        if not tx.logs:
            return

        if isinstance(msg, MsgCreateValidator):
            self._handle_msg_create_validator(tx.height, msg)
        elif isinstance(msg, MsgEditValidator):
            try:
                self.refresh_validator_infos(tx.height, msg.validator_address)
            except Exception as err:
                raise StakingError(
                    f"error while refreshing validator from MsgEditValidator: {err}"
                ) from err
        elif isinstance(msg, MsgDelegate):
            self.store_delegation_from_message(tx.height, msg)
        elif isinstance(msg, MsgBeginRedelegate):
            try:
                self.store_redelegation_from_message(tx, index, msg)
            except Exception as err:
                raise StakingError(f"error while storing redelegation from message: {err}") from err
            self.refresh_delegator_delegations(tx.height, msg.delegator_address)
        elif isinstance(msg, MsgUndelegate):
            try:
                self.store_unbonding_delegation_from_message(tx, index, msg)
            except Exception as err:
                raise StakingError(
                    f"error while storing unbonding delegation from message: {err}"
                ) from err
            self.refresh_delegator_delegations(tx.height, msg.delegator_address)

    def _handle_msg_create_validator(self, height: int, msg: MsgCreateValidator) -> None:
        try:
            self.refresh_validator_infos(height, msg.validator_address)
        except Exception as err:
            raise StakingError(
                f"error while refreshing validator from MsgCreateValidator: {err}"
            ) from err

        try:
            delegations = self._get_validator_delegations(height, msg.validator_address)
        except StakingError:
            return
        self.db.save_delegations(delegations)