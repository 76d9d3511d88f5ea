from django import template
from django.utils.safestring import mark_safe

register = template.Library()


@register.simple_tag
def error_display(presenter):
    """Render an ErrorPresenter in place; empty when there is nothing to show"""
    if presenter is None:
        return ''
    return mark_safe(presenter.render())
