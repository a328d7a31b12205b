# apps/outings/forms.py

from django import forms
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .models import OutingRequest
from .workflow import Decision
from apps.users.models import Department


class OutingRequestForm(forms.ModelForm):
    """
    Form students use to submit an outing request.
    """
    class Meta:
        model = OutingRequest
        fields = [
            'outing_type', 'destination', 'from_date', 'to_date',
            'from_time', 'to_time', 'reason'
        ]
        widgets = {
            'outing_type': forms.Select(attrs={'class': 'form-control'}),
            'destination': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': _('Where are you going?')
            }),
            'from_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'to_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'from_time': forms.TimeInput(attrs={'class': 'form-control', 'type': 'time'}),
            'to_time': forms.TimeInput(attrs={'class': 'form-control', 'type': 'time'}),
            'reason': forms.Textarea(attrs={
                'class': 'form-control',
                'rows': 3,
                'placeholder': _('Reason for the outing')
            }),
        }
        help_texts = {
            'from_time': _('Required for local outings'),
            'to_time': _('Required for local outings'),
        }

    def clean_from_date(self):
        from_date = self.cleaned_data['from_date']
        if from_date < timezone.localdate():
            raise forms.ValidationError(_('The outing cannot start in the past.'))
        return from_date


class ReviewForm(forms.Form):
    """Approve or reject a request, with optional comments."""

    decision = forms.ChoiceField(
        choices=Decision.choices,
        widget=forms.HiddenInput()
    )
    comments = forms.CharField(
        label=_('Comments (optional)'),
        required=False,
        widget=forms.Textarea(attrs={
            'class': 'form-control',
            'rows': 2,
            'placeholder': _('Add comments for your decision...')
        })
    )


class RequestFilterForm(forms.Form):
    """
    Filters shared by the principal dashboard and the CSV export.
    """
    search = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': _('Search by name, registration number or destination')
        })
    )
    outing_type = forms.ChoiceField(
        required=False,
        choices=[('', _('All Types'))] + list(OutingRequest.OutingType.choices),
        widget=forms.Select(attrs={'class': 'form-control'})
    )
    final_status = forms.ChoiceField(
        required=False,
        choices=[('', _('All Statuses'))] + list(OutingRequest.FinalStatus.choices),
        widget=forms.Select(attrs={'class': 'form-control'})
    )

    def filter_queryset(self, queryset):
        if not self.is_valid():
            return queryset

        queryset = queryset.search(self.cleaned_data.get('search', '').strip())

        outing_type = self.cleaned_data.get('outing_type')
        if outing_type:
            queryset = queryset.filter(outing_type=outing_type)

        final_status = self.cleaned_data.get('final_status')
        if final_status:
            queryset = queryset.filter(final_status=final_status)

        return queryset


class StudentFilterForm(forms.Form):
    """Principal's student directory filters."""

    search = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': _('Search by name or registration number')
        })
    )
    department = forms.ModelChoiceField(
        queryset=Department.objects.all(),
        required=False,
        empty_label=_('All Departments'),
        widget=forms.Select(attrs={'class': 'form-control'})
    )
    year_of_study = forms.TypedChoiceField(
        required=False,
        coerce=int,
        empty_value=None,
        choices=[('', _('All Years'))] + [(year, year) for year in range(1, 7)],
        widget=forms.Select(attrs={'class': 'form-control'})
    )

    def filter_queryset(self, queryset):
        from django.db.models import Q

        if not self.is_valid():
            return queryset

        search = self.cleaned_data.get('search', '').strip()
        if search:
            queryset = queryset.filter(
                Q(full_name__icontains=search) | Q(student_id__icontains=search)
            )

        department = self.cleaned_data.get('department')
        if department:
            queryset = queryset.filter(department=department)

        year_of_study = self.cleaned_data.get('year_of_study')
        if year_of_study:
            queryset = queryset.filter(year_of_study=year_of_study)

        return queryset
