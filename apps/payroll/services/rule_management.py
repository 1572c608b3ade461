"""Payroll rules, sales tiers, rule assignments and nomination types."""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet

from ..models import NominationType, PayrollRule, PayrollRuleAssignment, SalesTier
from .exceptions import (
    DuplicateNominationTypeError,
    NoActiveRuleError,
    NominationTypeNotFoundError,
    PayrollRuleNotFoundError,
)

logger = logging.getLogger(__name__)

RULE_FIELDS = (
    'rule_name', 'description', 'base_hourly_rate', 'base_back_percentage',
    'is_active', 'effective_from', 'effective_until',
)
NOMINATION_TYPE_FIELDS = ('type_name', 'display_name', 'price', 'back_percentage', 'is_active')


def get_rule(*, rule_id: UUID) -> PayrollRule:
    try:
        return PayrollRule.objects.prefetch_related('sales_tiers').get(id=rule_id)
    except PayrollRule.DoesNotExist:
        raise PayrollRuleNotFoundError(f"Payroll rule {rule_id} not found")


def _replace_tiers(rule: PayrollRule, tiers: Iterable[dict]) -> None:
    rule.sales_tiers.all().delete()
    SalesTier.objects.bulk_create([SalesTier(rule=rule, **tier) for tier in tiers])


@transaction.atomic
def create_rule(*, tiers: Optional[Iterable[dict]] = None, **fields) -> PayrollRule:
    data = {key: value for key, value in fields.items() if key in RULE_FIELDS}
    rule = PayrollRule.objects.create(**data)
    if tiers:
        _replace_tiers(rule, tiers)
    logger.info('Payroll rule %s created', rule.rule_name)
    return rule


@transaction.atomic
def update_rule(*, rule_id: UUID, tiers: Optional[Iterable[dict]] = None, **fields) -> PayrollRule:
    """Update a rule. When ``tiers`` is given it replaces the existing tiers."""
    rule = get_rule(rule_id=rule_id)
    for key, value in fields.items():
        if key in RULE_FIELDS:
            setattr(rule, key, value)
    rule.save()
    if tiers is not None:
        _replace_tiers(rule, tiers)
    return rule


@transaction.atomic
def deactivate_rule(*, rule_id: UUID) -> PayrollRule:
    rule = get_rule(rule_id=rule_id)
    rule.is_active = False
    rule.save(update_fields=['is_active', 'updated_at'])
    return rule


def list_rules(*, is_active: Optional[bool] = None) -> QuerySet:
    qs = PayrollRule.objects.prefetch_related('sales_tiers')
    if is_active is not None:
        qs = qs.filter(is_active=is_active)
    return qs


@transaction.atomic
def assign_rule(
    *,
    cast_id: UUID,
    rule_id: UUID,
    assigned_from: date,
    assigned_until: Optional[date] = None,
) -> PayrollRuleAssignment:
    """
    Assign a rule to a cast from ``assigned_from``.

    Open-ended assignments that started earlier are closed the day before.
    """
    rule = get_rule(rule_id=rule_id)

    PayrollRuleAssignment.objects.filter(
        cast_id=cast_id,
        is_active=True,
        assigned_until__isnull=True,
        assigned_from__lt=assigned_from,
    ).update(assigned_until=assigned_from - timedelta(days=1))

    assignment = PayrollRuleAssignment.objects.create(
        cast_id=cast_id,
        rule=rule,
        assigned_from=assigned_from,
        assigned_until=assigned_until,
    )
    logger.info('Rule %s assigned to cast %s from %s', rule.rule_name, cast_id, assigned_from)
    return assignment


def active_rule(*, cast_id: UUID, on_date: date) -> PayrollRuleAssignment:
    """
    The assignment in force for a cast on ``on_date``.

    Raises:
        NoActiveRuleError: If no active assignment covers the date
    """
    assignment = (
        PayrollRuleAssignment.objects
        .select_related('rule')
        .filter(cast_id=cast_id, is_active=True, assigned_from__lte=on_date)
        .filter(Q(assigned_until__isnull=True) | Q(assigned_until__gte=on_date))
        .order_by('-assigned_from')
        .first()
    )
    if assignment is None:
        raise NoActiveRuleError(f"No payroll rule assigned to cast {cast_id} on {on_date}")
    return assignment


def list_assignments(*, cast_id: Optional[UUID] = None) -> QuerySet:
    qs = PayrollRuleAssignment.objects.select_related('rule', 'cast')
    if cast_id:
        qs = qs.filter(cast_id=cast_id)
    return qs


def get_nomination_type(*, nomination_type_id: UUID) -> NominationType:
    try:
        return NominationType.objects.get(id=nomination_type_id)
    except NominationType.DoesNotExist:
        raise NominationTypeNotFoundError(f"Nomination type {nomination_type_id} not found")


def _check_type_name(type_name: str, exclude_id=None) -> None:
    qs = NominationType.objects.filter(type_name=type_name)
    if exclude_id:
        qs = qs.exclude(id=exclude_id)
    if qs.exists():
        raise DuplicateNominationTypeError(f"Nomination type '{type_name}' already exists")


@transaction.atomic
def create_nomination_type(**fields) -> NominationType:
    data = {key: value for key, value in fields.items() if key in NOMINATION_TYPE_FIELDS}
    _check_type_name(data.get('type_name', ''))
    return NominationType.objects.create(**data)


@transaction.atomic
def update_nomination_type(*, nomination_type_id: UUID, **fields) -> NominationType:
    nomination_type = get_nomination_type(nomination_type_id=nomination_type_id)
    if 'type_name' in fields:
        _check_type_name(fields['type_name'], exclude_id=nomination_type.id)
    for key, value in fields.items():
        if key in NOMINATION_TYPE_FIELDS:
            setattr(nomination_type, key, value)
    nomination_type.save()
    return nomination_type


@transaction.atomic
def delete_nomination_type(*, nomination_type_id: UUID) -> NominationType:
    """Deactivate a nomination type. Past nominations keep their reference."""
    nomination_type = get_nomination_type(nomination_type_id=nomination_type_id)
    nomination_type.is_active = False
    nomination_type.save(update_fields=['is_active', 'updated_at'])
    return nomination_type


def list_nomination_types(*, is_active: Optional[bool] = None) -> QuerySet:
    qs = NominationType.objects.all()
    if is_active is not None:
        qs = qs.filter(is_active=is_active)
    return qs
