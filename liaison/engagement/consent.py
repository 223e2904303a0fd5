"""Consent ledger for data scopes shared with a provider.

Grants are validated against the data scope registry and the offering's
required scopes before anything is applied, so a rejected grant leaves the
engagement untouched.
"""

from collections.abc import Iterable, Sequence

from liaison.catalog.models import Offering
from liaison.engagement.enums import ConsentAction, Transition
from liaison.engagement.models import ConsentEvent, Engagement, utc_now
from liaison.engagement.results import DataAccessStatus, GrantResult, RevokeResult, ScopeStatus
from liaison.engagement.state_machine import EngagementStateMachine
from liaison.errors import ErrorCode
from liaison.observability.logging import get_logger
from liaison.observability.metrics import SCOPE_GRANTS
from liaison.registry.data_scopes import DataScopeRegistry

logger = get_logger(__name__)


class ConsentLedger:
    """Grants, revokes and reports data scope consent for one engagement at a time."""

    def __init__(
        self,
        scope_registry: DataScopeRegistry,
        state_machine: EngagementStateMachine,
    ) -> None:
        self._scopes = scope_registry
        self._state_machine = state_machine

    def grant(
        self,
        engagement: Engagement,
        offering: Offering,
        scopes: Sequence[str],
    ) -> GrantResult:
        """Grant data scopes to the engagement's provider.

        All scopes are validated first; one bad scope rejects the whole call.
        Re-granting a scope that is already granted is a no-op. Once every
        required scope is granted on an active engagement, the engagement
        moves to data_shared.
        """
        if not scopes:
            return GrantResult.fail(ErrorCode.VALIDATION_ERROR, "No scopes given")
        if any(not isinstance(scope, str) or not scope for scope in scopes):
            return GrantResult.fail(
                ErrorCode.VALIDATION_ERROR, "Scope keys must be non-empty strings"
            )

        if engagement.is_terminal:
            return GrantResult.fail(
                ErrorCode.INVALID_STATE,
                f"Cannot grant data scopes on {engagement.status.value} engagements",
            )

        invalid = self._scopes.validate(scopes)
        if invalid:
            return GrantResult.fail(
                ErrorCode.INVALID_SCOPE,
                "Invalid scopes: " + ", ".join(invalid),
                invalid_scopes=invalid,
            )

        unrequested = _unique(s for s in scopes if not offering.requires_data_scope(s))
        if unrequested:
            return GrantResult.fail(
                ErrorCode.INVALID_SCOPE,
                "Scopes not requested by offering: " + ", ".join(unrequested),
                unrequested_scopes=unrequested,
            )

        newly_granted: list[str] = []
        already_granted: list[str] = []
        for scope in _unique(scopes):
            if engagement.has_granted_scope(scope):
                already_granted.append(scope)
            else:
                newly_granted.append(scope)

        if newly_granted:
            now = utc_now()
            engagement.granted_scopes = engagement.granted_scopes | set(newly_granted)
            engagement.consent_history = [
                *engagement.consent_history,
                *(
                    ConsentEvent(scope=scope, action=ConsentAction.GRANTED, at=now)
                    for scope in newly_granted
                ),
            ]
            engagement.touch()
            for scope in newly_granted:
                entry = self._scopes.get(scope)
                if entry is not None:
                    SCOPE_GRANTS.labels(sensitivity=entry.sensitivity.value).inc()

        all_granted = self.all_required_granted(engagement, offering)
        data_shared = self.sync_status(engagement, offering)

        logger.info(
            "data_scopes_granted",
            tenant_id=str(engagement.tenant_id),
            engagement_id=str(engagement.id),
            newly_granted=newly_granted,
            already_granted=already_granted,
            all_required_granted=all_granted,
        )

        return GrantResult(
            success=True,
            granted_scopes=engagement.granted_scope_keys(),
            newly_granted=newly_granted,
            already_granted=already_granted,
            all_required_granted=all_granted,
            data_shared=data_shared,
        )

    def revoke(self, engagement: Engagement, scope: str) -> RevokeResult:
        """Revoke one granted scope.

        The engagement status is left as it is, even when the revocation
        leaves required scopes ungranted.
        """
        if not engagement.has_granted_scope(scope):
            return RevokeResult.fail(
                ErrorCode.NOT_GRANTED,
                f"Scope not granted: {scope}",
                revoked_scope=scope,
                remaining_scopes=engagement.granted_scope_keys(),
            )

        engagement.granted_scopes = engagement.granted_scopes - {scope}
        engagement.consent_history = [
            *engagement.consent_history,
            ConsentEvent(scope=scope, action=ConsentAction.REVOKED),
        ]
        engagement.touch()

        logger.info(
            "data_scope_revoked",
            tenant_id=str(engagement.tenant_id),
            engagement_id=str(engagement.id),
            scope=scope,
        )

        return RevokeResult(
            success=True,
            revoked_scope=scope,
            remaining_scopes=engagement.granted_scope_keys(),
        )

    def status(self, engagement: Engagement, offering: Offering) -> DataAccessStatus:
        """Grant state of every scope the offering requires."""
        required = sorted(offering.required_data_scopes)
        scopes: dict[str, ScopeStatus] = {}
        for key in required:
            entry = self._scopes.get(key)
            scopes[key] = ScopeStatus(
                label=entry.label if entry else key,
                description=entry.description if entry else "",
                sensitivity=entry.sensitivity if entry else None,
                granted=engagement.has_granted_scope(key),
            )

        return DataAccessStatus(
            success=True,
            required_scopes=scopes,
            all_granted=all(status.granted for status in scopes.values()),
            granted_count=len(engagement.granted_scopes),
            required_count=len(required),
        )

    def sync_status(self, engagement: Engagement, offering: Offering) -> bool:
        """Move an active engagement to data_shared once every required scope is granted.

        Returns whether the engagement advanced.
        """
        if not self.all_required_granted(engagement, offering):
            return False
        if not self._state_machine.can_apply(engagement, Transition.MARK_DATA_SHARED):
            return False
        return self._state_machine.mark_data_shared(engagement).success

    @staticmethod
    def all_required_granted(engagement: Engagement, offering: Offering) -> bool:
        return offering.required_data_scopes <= engagement.granted_scopes


def _unique(items: Iterable[str]) -> list[str]:
    """De-duplicate while keeping first-seen order."""
    return list(dict.fromkeys(items))
