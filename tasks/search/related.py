"""
Abstract base for records whose text is copied into `Task.searchable_text`.

Customers and locations keep their own searchable text and, when one of
their text fields changes or they are deleted, refresh every task that
points at them inside the same transaction (or hand large fan-outs to a
background job, see `tasks.search.refresh`).
"""
from django.db import models, transaction

from fieldops.utils.base_model import DjangoBaseModel


class SearchableRelatedModel(DjangoBaseModel):
    """
    Subclasses set:
        SEARCH_FIELDS: fields whose values end up in task searchable text
        TASK_RELATION: name of the Task foreign key pointing at this model
    and implement `build_searchable_text()`.
    """

    SEARCH_FIELDS: tuple = ()
    TASK_RELATION: str = ''

    searchable_text = models.TextField(null=True, blank=True, editable=False)

    class Meta:
        abstract = True

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._remember_search_values()
        return instance

    def build_searchable_text(self):
        raise NotImplementedError

    def _current_search_values(self) -> tuple:
        return tuple(getattr(self, name) for name in self.SEARCH_FIELDS)

    def _remember_search_values(self):
        # Deferred fields are not in __dict__; leave the snapshot unset so the
        # next save treats them as changed.
        if all(name in self.__dict__ for name in self.SEARCH_FIELDS):
            self._loaded_search_values = self._current_search_values()

    def search_values_changed(self) -> bool:
        loaded = getattr(self, '_loaded_search_values', None)
        return loaded is None or loaded != self._current_search_values()

    def save(self, *args, **kwargs):
        from tasks.search.refresh import cascade_related_refresh

        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = {*update_fields, 'searchable_text'}

        with transaction.atomic():
            is_new = self._state.adding
            changed = self.search_values_changed()
            self.searchable_text = self.build_searchable_text()
            super().save(*args, **kwargs)
            # The update above holds this row's lock until commit; Task.save
            # takes the same lock first, so the two writers queue on it.
            if not is_new and changed:
                cascade_related_refresh(self.TASK_RELATION, self.pk)
        self._remember_search_values()

    def delete(self, *args, **kwargs):
        from tasks.models import Task
        from tasks.search.refresh import refresh_task_ids

        with transaction.atomic():
            # The FK is SET_NULL: collect the tasks before the pointer disappears
            task_ids = list(
                Task.objects.filter(**{f'{self.TASK_RELATION}_id': self.pk}).values_list('pk', flat=True)
            )
            result = super().delete(*args, **kwargs)
            if task_ids:
                refresh_task_ids(task_ids)
        return result
