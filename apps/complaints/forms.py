from django import forms
from django.utils.translation import gettext_lazy as _

from .models import Complaint


class ComplaintForm(forms.ModelForm):
    """
    Form students use to raise a complaint.
    """
    class Meta:
        model = Complaint
        fields = ['title', 'category', 'description', 'is_anonymous']
        widgets = {
            'title': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': _('Short summary')
            }),
            'category': forms.Select(attrs={'class': 'form-control'}),
            'description': forms.Textarea(attrs={
                'class': 'form-control',
                'rows': 4,
                'placeholder': _('Describe the problem')
            }),
            'is_anonymous': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
        }


class ComplaintResponseForm(forms.ModelForm):
    """
    Form staff use to update a complaint's status and reply.
    """
    class Meta:
        model = Complaint
        fields = ['status', 'admin_response']
        widgets = {
            'status': forms.Select(attrs={'class': 'form-control'}),
            'admin_response': forms.Textarea(attrs={
                'class': 'form-control',
                'rows': 3,
                'placeholder': _('Response to the student')
            }),
        }

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('status') == Complaint.Status.RESOLVED and not cleaned_data.get('admin_response'):
            raise forms.ValidationError(_("Please add a response before marking the complaint resolved."))
        return cleaned_data
