# apps/groups/services/dynamodb_handler.py

import base64
import json
import logging
from decimal import Decimal
from functools import reduce

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError
from django.conf import settings

from ..exceptions import EntryAlreadyExists, EntryChanged, EntryNotFound, StoreError

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = 'ConditionalCheckFailedException'


def _entries_table():
    dynamodb = boto3.resource(
        'dynamodb',
        region_name=settings.AWS_REGION_NAME,
        endpoint_url=settings.DYNAMODB_ENDPOINT_URL,
    )
    return dynamodb.Table(settings.DYNAMODB_ENTRIES_TABLE)


def _from_dynamo(item):
    """DynamoDB returns numbers as Decimal; entries only hold integers."""
    if item is None:
        return None
    entry = dict(item)
    for key, value in entry.items():
        if isinstance(value, Decimal):
            entry[key] = int(value)
    entry['tags'] = list(entry.get('tags') or [])
    return entry


def _set_clause(fields):
    """Builds 'SET #f0 = :v0, ...' with placeholder names for every attribute."""
    names, values, assignments = {}, {}, []
    for i, (name, value) in enumerate(fields.items()):
        names[f'#f{i}'] = name
        values[f':v{i}'] = value
        assignments.append(f'#f{i} = :v{i}')
    return 'SET ' + ', '.join(assignments), names, values


def encode_cursor(last_evaluated_key):
    if not last_evaluated_key:
        return None
    raw = json.dumps(last_evaluated_key, default=str).encode()
    return base64.urlsafe_b64encode(raw).decode()


def decode_cursor(cursor):
    """Returns the ExclusiveStartKey for a cursor, or raises ValueError."""
    if not cursor:
        return None
    try:
        key = json.loads(base64.urlsafe_b64decode(cursor.encode()))
    except (ValueError, TypeError) as e:
        raise ValueError("Invalid cursor.") from e
    if not isinstance(key, dict) or 'id' not in key:
        raise ValueError("Invalid cursor.")
    return key


class EntryStore:
    """
    Group entries in the DynamoDB 'entries' table, keyed by 'id'.

    Every write touches a single item. Counters are changed with ADD so
    concurrent writers never lose each other's updates.
    """

    def __init__(self, table=None):
        self.table = table if table is not None else _entries_table()

    def _raise_for(self, error, entry_id, on_condition):
        if error.response['Error']['Code'] == CONDITIONAL_CHECK_FAILED:
            raise on_condition from error
        logger.error("DynamoDB error for entry %s: %s", entry_id, error)
        raise StoreError(str(error)) from error

    def get_entry(self, entry_id):
        try:
            response = self.table.get_item(Key={'id': entry_id})
        except ClientError as e:
            self._raise_for(e, entry_id, StoreError(str(e)))
        return _from_dynamo(response.get('Item'))

    def create_entry(self, item):
        """Stores a new entry unless one with the same id already exists."""
        try:
            self.table.put_item(
                Item=item,
                ConditionExpression='attribute_not_exists(id)'
            )
        except ClientError as e:
            self._raise_for(e, item['id'], EntryAlreadyExists(item['id']))
        logger.info("Created entry %s for %s", item['id'], item.get('link'))
        return _from_dynamo(item)

    def bump_entry(self, entry_id, fields, submitted_at, previous_submitted_at):
        """
        Applies a resubmission: overwrites the content fields, sets
        lastSubmittedAt and adds one to submissionCount. The write only goes
        through if lastSubmittedAt still holds the value the caller saw.
        """
        update, names, values = _set_clause({**fields, 'lastSubmittedAt': submitted_at})
        update += ' ADD #count :one'
        names['#count'] = 'submissionCount'
        names['#last'] = 'lastSubmittedAt'
        values[':one'] = 1

        condition = 'attribute_exists(id) AND '
        if previous_submitted_at is None:
            condition += 'attribute_not_exists(#last)'
        else:
            condition += '#last = :previous'
            values[':previous'] = previous_submitted_at

        try:
            response = self.table.update_item(
                Key={'id': entry_id},
                UpdateExpression=update,
                ConditionExpression=condition,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues='ALL_NEW'
            )
        except ClientError as e:
            self._raise_for(e, entry_id, EntryChanged(entry_id))
        return _from_dynamo(response['Attributes'])

    def update_entry(self, entry_id, fields):
        """Overwrites the given fields of an existing entry."""
        update, names, values = _set_clause(fields)
        try:
            response = self.table.update_item(
                Key={'id': entry_id},
                UpdateExpression=update,
                ConditionExpression='attribute_exists(id)',
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues='ALL_NEW'
            )
        except ClientError as e:
            self._raise_for(e, entry_id, EntryNotFound(entry_id))
        return _from_dynamo(response['Attributes'])

    def add_rating(self, entry_id, rating):
        """
        Adds one rating to the entry's totals in a single atomic update and
        returns the new (totalRating, ratingCount).
        """
        try:
            response = self.table.update_item(
                Key={'id': entry_id},
                UpdateExpression='ADD totalRating :rating, ratingCount :one',
                ConditionExpression='attribute_exists(id)',
                ExpressionAttributeValues={':rating': rating, ':one': 1},
                ReturnValues='ALL_NEW'
            )
        except ClientError as e:
            self._raise_for(e, entry_id, EntryNotFound(entry_id))
        attributes = response['Attributes']
        return int(attributes['totalRating']), int(attributes['ratingCount'])

    def increment_clicks(self, entry_id):
        try:
            response = self.table.update_item(
                Key={'id': entry_id},
                UpdateExpression='ADD clicks :one',
                ConditionExpression='attribute_exists(id)',
                ExpressionAttributeValues={':one': 1},
                ReturnValues='UPDATED_NEW'
            )
        except ClientError as e:
            self._raise_for(e, entry_id, EntryNotFound(entry_id))
        return int(response['Attributes']['clicks'])

    def delete_entry(self, entry_id):
        try:
            response = self.table.delete_item(
                Key={'id': entry_id},
                ReturnValues='ALL_OLD'
            )
        except ClientError as e:
            self._raise_for(e, entry_id, StoreError(str(e)))
        if 'Attributes' not in response:
            raise EntryNotFound(entry_id)
        logger.info("Deleted entry %s", entry_id)
        return _from_dynamo(response['Attributes'])

    def scan_page(self, limit, start_key=None):
        """One page of a full-table scan, for the admin listing."""
        kwargs = {'Limit': limit}
        if start_key:
            kwargs['ExclusiveStartKey'] = start_key
        try:
            response = self.table.scan(**kwargs)
        except ClientError as e:
            self._raise_for(e, None, StoreError(str(e)))
        items = [_from_dynamo(item) for item in response.get('Items', [])]
        return items, response.get('LastEvaluatedKey')

    def list_entries(self, category=None, country=None, tag=None, entry_type=None, featured=None):
        """
        All entries matching the given filters. Follows LastEvaluatedKey
        until the scan is exhausted.
        """
        conditions = []
        if category:
            conditions.append(Attr('category').eq(category))
        if country:
            conditions.append(Attr('country').eq(country))
        if tag:
            conditions.append(Attr('tags').contains(tag))
        if entry_type:
            conditions.append(Attr('type').eq(entry_type))
        if featured is not None:
            conditions.append(Attr('featured').eq(featured))

        kwargs = {}
        if conditions:
            kwargs['FilterExpression'] = reduce(lambda a, b: a & b, conditions)

        entries = []
        try:
            while True:
                response = self.table.scan(**kwargs)
                entries.extend(_from_dynamo(item) for item in response.get('Items', []))
                if 'LastEvaluatedKey' not in response:
                    break
                kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
        except ClientError as e:
            self._raise_for(e, None, StoreError(str(e)))
        return entries


_default_store = None


def get_entry_store():
    """The process-wide EntryStore bound to the configured table."""
    global _default_store
    if _default_store is None:
        _default_store = EntryStore()
    return _default_store
