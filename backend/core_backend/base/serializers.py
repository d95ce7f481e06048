from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base for every model serializer in the project.

    Response serializers here are read-only views of models; subclasses
    declare `read_only_fields = fields` and never implement create/update.
    """


class FieldsetMixin:
    """
    Trims a serializer's fields from its context.

    - `view_mode`: picks a named fieldset from Meta.fieldsets
      ("__all__" keeps every field)
    - `requested_fields`: a client projection such as ?fields=total,order_status

    Meta.required_fields (default {"id"}) survive both filters, so an order
    response always carries its id and embedded customer.

    Usage:
        class OrderSerializer(FieldsetMixin, BaseModelSerializer):
            class Meta:
                model = Order
                fields = [...]
                required_fields = {"id", "customer"}
                fieldsets = {"mine": [...], "detail": "__all__"}

    Requested names are not checked here; callers validate them against
    their own allow-list first.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._keep_only(self._fieldset())
        self._keep_only(self.context.get("requested_fields"))

    def _required_fields(self):
        return set(getattr(self.Meta, "required_fields", {"id"}))

    def _fieldset(self):
        view_mode = self.context.get("view_mode")
        fieldset = getattr(self.Meta, "fieldsets", {}).get(view_mode)
        if fieldset == "__all__":
            return None
        return fieldset

    def _keep_only(self, names):
        if not names:
            return
        allowed = set(names) | self._required_fields()
        for field_name in set(self.fields.keys()) - allowed:
            self.fields.pop(field_name)
