"""Reconcile data models: targets, corrective actions and outcomes."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClusterDescriptor(BaseModel):
    """Selects one inventory cluster. An empty field is not used as a filter."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Cluster name (may be empty)")
    region: str = Field(default="", description="Region slug")
    type: str = Field(default="", description="Cluster type slug")

    def __str__(self) -> str:
        return f"{self.name or '*'}/{self.region}/{self.type}"


class UpdateSpec(BaseModel):
    """A named set of clusters reconciled together; the name is the queue key."""

    name: str = Field(description="Unique key of this update")
    clusters: list[ClusterDescriptor] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("update name must not be empty")
        return v


# ============================================
# Corrective actions
# ============================================


class RenameInterface(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["rename_interface"] = "rename_interface"
    device_id: int
    interface_id: int
    old_name: str
    new_name: str
    interface_type: str = ""

    def describe(self) -> str:
        return f"rename {self.old_name} interface ({self.interface_id}) to {self.new_name}"


class UpdateDevice(BaseModel):
    """Sets platform and OOB IP together; unchanged fields carry the current value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["update_device"] = "update_device"
    device_id: int
    platform_id: int
    oob_ip_id: int

    def describe(self) -> str:
        return f"update device ({self.device_id}) platform={self.platform_id} oob_ip={self.oob_ip_id}"


class DeleteAddress(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["delete_address"] = "delete_address"
    address_id: int
    address: str = ""
    interface_name: str = ""

    def describe(self) -> str:
        return f"delete {self.address} IP ({self.address_id}) of interface {self.interface_name}"


class DeleteInterface(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["delete_interface"] = "delete_interface"
    interface_id: int
    name: str = ""

    def describe(self) -> str:
        return f"delete {self.name} interface ({self.interface_id})"


Action = Annotated[
    RenameInterface | UpdateDevice | DeleteAddress | DeleteInterface,
    Field(discriminator="kind"),
]


# ============================================
# Outcome
# ============================================


class ReconcileState(str, Enum):
    READY = "Ready"
    ERROR = "Error"


class ConditionReason(str, Enum):
    UPDATE_SUCCEEDED = "UpdateSucceeded"
    UPDATE_FAILED = "UpdateFailed"


CONDITION_MESSAGES = {
    ConditionReason.UPDATE_SUCCEEDED: "Update succeeded",
    ConditionReason.UPDATE_FAILED: "Update failed",
}


class Condition(BaseModel):
    type: str = "Ready"
    status: bool
    reason: ConditionReason
    message: str

    @classmethod
    def from_reason(cls, reason: ConditionReason, message: str = "") -> "Condition":
        return cls(
            status=reason == ConditionReason.UPDATE_SUCCEEDED,
            reason=reason,
            message=message or CONDITION_MESSAGES[reason],
        )


class ReconcileOutcome(BaseModel):
    """Result of one pass over an update's clusters."""

    state: ReconcileState
    description: str = ""
    actions: list[Action] = Field(default_factory=list)

    @property
    def ready(self) -> bool:
        return self.state == ReconcileState.READY

    @classmethod
    def success(cls, actions: list | None = None) -> "ReconcileOutcome":
        return cls(state=ReconcileState.READY, actions=actions or [])

    @classmethod
    def failure(cls, description: str, actions: list | None = None) -> "ReconcileOutcome":
        return cls(state=ReconcileState.ERROR, description=description, actions=actions or [])

    def condition(self) -> Condition:
        if self.ready:
            return Condition.from_reason(ConditionReason.UPDATE_SUCCEEDED)
        return Condition.from_reason(ConditionReason.UPDATE_FAILED)
