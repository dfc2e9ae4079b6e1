"""
Serializers for the tasks API.

Request parameters and response fields use the mobile client's camelCase
names; `source=` maps them onto the snake_case model and filter attributes.
"""
from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import serializers

from crm.models import Customer
from fieldops.utils.enum import choices
from locations.models import Location
from tasks.models import Task
from tasks.search.config import get_search_config
from tasks.search.exceptions import InvalidCursorError
from tasks.search.filters import DateRange, FilterSpec
from tasks.search.pagination import Cursor
from tasks.types import SearchScope, SortField, SortOrder, TaskStatus


class CommaSeparatedListField(serializers.ListField):
    """A list that also accepts "a,b" strings, alone or as list items."""

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = [data]
        if isinstance(data, (list, tuple)):
            items = []
            for item in data:
                if isinstance(item, str):
                    items.extend(part.strip() for part in item.split(',') if part.strip())
                else:
                    items.append(item)
            data = items
        return super().to_internal_value(data)


class DateBoundField(serializers.DateTimeField):
    """
    ISO-8601 date or datetime. A bare date means the start of that day, or
    its last instant when `end_of_day` is set, so "to" bounds include the
    whole day.
    """

    def __init__(self, *, end_of_day=False, **kwargs):
        self.end_of_day = end_of_day
        super().__init__(**kwargs)

    def to_internal_value(self, value):
        if isinstance(value, str) and len(value.strip()) == 10:
            try:
                day = parse_date(value.strip())
            except ValueError:
                self.fail('invalid', format='YYYY-MM-DD or ISO-8601 datetime')
            if day is not None:
                moment = datetime.combine(day, time.max if self.end_of_day else time.min)
                return timezone.make_aware(moment, timezone.get_current_timezone())
        return super().to_internal_value(value)


DATE_AXES = (
    ('scheduled', 'scheduledFrom', 'scheduledTo'),
    ('created', 'createdFrom', 'createdTo'),
    ('completed', 'completedFrom', 'completedTo'),
)


class TaskSearchQuerySerializer(serializers.Serializer):
    """
    Validates search parameters. Nothing is clamped: an out-of-range page
    size or an unusable cursor is an error.
    """

    search = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    status = CommaSeparatedListField(
        child=serializers.ChoiceField(choices=choices(TaskStatus)),
        required=False,
        source='statuses',
    )
    assigneeIds = CommaSeparatedListField(
        child=serializers.CharField(max_length=64),
        required=False,
        source='assignee_ids',
    )
    customerId = serializers.UUIDField(required=False, allow_null=True, source='customer_id')
    scheduledFrom = DateBoundField(required=False, allow_null=True, source='scheduled_from')
    scheduledTo = DateBoundField(required=False, allow_null=True, end_of_day=True, source='scheduled_to')
    createdFrom = DateBoundField(required=False, allow_null=True, source='created_from')
    createdTo = DateBoundField(required=False, allow_null=True, end_of_day=True, source='created_to')
    completedFrom = DateBoundField(required=False, allow_null=True, source='completed_from')
    completedTo = DateBoundField(required=False, allow_null=True, end_of_day=True, source='completed_to')
    sortBy = serializers.ChoiceField(
        choices=[field.value for field in SortField],
        required=False,
        default=SortField.CREATED_AT.value,
        source='sort_by',
    )
    sortOrder = serializers.ChoiceField(
        choices=[order.value for order in SortOrder],
        required=False,
        default=SortOrder.DESC.value,
        source='sort_order',
    )
    restrictToMine = serializers.BooleanField(required=False, default=False, source='restrict_to_mine')
    cursor = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1024)

    def __init__(self, *args, config=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or get_search_config()
        self.fields['pageSize'] = serializers.IntegerField(
            required=False,
            default=self.config.default_page_size,
            min_value=self.config.min_page_size,
            max_value=self.config.max_page_size,
            source='page_size',
        )

    def validate(self, attrs):
        errors = {}
        for axis, from_name, to_name in DATE_AXES:
            start = attrs.get(f'{axis}_from')
            end = attrs.get(f'{axis}_to')
            if start is not None and end is not None and start > end:
                errors[to_name] = [f"Must not be earlier than {from_name}."]

        cursor = attrs.get('cursor')
        if cursor:
            try:
                Cursor.decode(cursor, SortField(attrs['sort_by']))
            except InvalidCursorError as e:
                errors['cursor'] = [str(e)]

        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    def to_filter_spec(self) -> FilterSpec:
        data = self.validated_data
        return FilterSpec(
            search=data.get('search') or None,
            statuses=frozenset(data.get('statuses') or ()),
            assignee_ids=frozenset(data.get('assignee_ids') or ()),
            customer_id=data.get('customer_id'),
            scheduled=DateRange(data.get('scheduled_from'), data.get('scheduled_to')),
            created=DateRange(data.get('created_from'), data.get('created_to')),
            completed=DateRange(data.get('completed_from'), data.get('completed_to')),
            sort_by=SortField(data['sort_by']),
            sort_order=SortOrder(data['sort_order']),
            scope=SearchScope.MINE if data.get('restrict_to_mine') else SearchScope.ALL,
            cursor=data.get('cursor') or None,
            page_size=data['page_size'],
        )


class CustomerSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ['id', 'name', 'phone']


class LocationSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = ['id', 'name', 'address', 'lat', 'lng']


class TaskSerializer(serializers.ModelSerializer):
    """Task as returned by search. Related records are nested, assignees are ids."""

    assigneeIds = serializers.ListField(child=serializers.CharField(), source='assignee_ids', read_only=True)
    customer = CustomerSummarySerializer(read_only=True, allow_null=True)
    location = LocationSummarySerializer(read_only=True, allow_null=True)
    scheduledAt = serializers.DateTimeField(source='scheduled_at', read_only=True, allow_null=True)
    startedAt = serializers.DateTimeField(source='started_at', read_only=True, allow_null=True)
    completedAt = serializers.DateTimeField(source='completed_at', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Task
        fields = [
            'id',
            'title',
            'description',
            'status',
            'assigneeIds',
            'customer',
            'location',
            'scheduledAt',
            'startedAt',
            'completedAt',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields


class TaskSearchResultSerializer(serializers.Serializer):
    items = TaskSerializer(many=True)
    nextCursor = serializers.CharField(source='next_cursor', allow_null=True)
    hasNextPage = serializers.BooleanField(source='has_next_page')
