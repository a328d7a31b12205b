# apps/hostels/forms.py

from django import forms
from django.utils.translation import gettext_lazy as _

from .models import Room
from apps.users.models import Profile


class RoomForm(forms.ModelForm):
    """Form for creating and updating rooms."""

    class Meta:
        model = Room
        fields = ['room_number', 'floor', 'capacity']
        widgets = {
            'room_number': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': _('e.g. 101')
            }),
            'floor': forms.NumberInput(attrs={'class': 'form-control', 'min': '0'}),
            'capacity': forms.NumberInput(attrs={'class': 'form-control', 'min': '1'}),
        }

    def clean_capacity(self):
        capacity = self.cleaned_data['capacity']
        if capacity < 1:
            raise forms.ValidationError(_('Room capacity must be at least 1.'))
        if self.instance.pk and capacity < self.instance.current_occupancy:
            raise forms.ValidationError(
                _('Capacity cannot be lower than the %(count)s current residents.') % {
                    'count': self.instance.current_occupancy
                }
            )
        return capacity


class KeyIssueForm(forms.Form):
    """Pick a resident and an empty key slot."""

    profile = forms.ModelChoiceField(
        queryset=Profile.objects.none(),
        label=_('Resident'),
        widget=forms.Select(attrs={'class': 'form-control'})
    )
    slot = forms.ChoiceField(
        choices=Profile.KeySlot.choices,
        label=_('Key'),
        widget=forms.Select(attrs={'class': 'form-control'})
    )

    def __init__(self, *args, room=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.room = room
        if room is not None:
            self.fields['profile'].queryset = room.residents.filter(key_number='')
            # Occupied slots are not offered
            self.fields['slot'].choices = [
                (value, label) for value, label in Profile.KeySlot.choices
                if not room.slot_holder_id(value)
            ]


class ResidentAssignForm(forms.Form):
    """Move a student into a room."""

    profile = forms.ModelChoiceField(
        queryset=Profile.objects.filter(role=Profile.Role.STUDENT),
        label=_('Student'),
        widget=forms.Select(attrs={'class': 'form-control'})
    )

    def __init__(self, *args, room=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.room = room
        if room is not None:
            self.fields['profile'].queryset = Profile.objects.filter(
                role=Profile.Role.STUDENT
            ).exclude(room=room)

    def clean(self):
        cleaned_data = super().clean()
        if self.room is not None and self.room.is_full:
            raise forms.ValidationError(_('This room is already full.'))
        return cleaned_data
