# apps/users/forms.py

from django import forms
from django.conf import settings
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.template.defaultfilters import filesizeformat
from django.utils.translation import gettext_lazy as _

from .models import User, Profile, Department


class LoginForm(forms.Form):
    """Email or registration number with password."""

    username = forms.CharField(
        label=_('Email or registration number'),
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': _('you@example.com'),
            'autofocus': True
        })
    )
    password = forms.CharField(
        label=_('Password'),
        widget=forms.PasswordInput(attrs={'class': 'form-control'})
    )
    remember_me = forms.BooleanField(
        label=_('Remember me'),
        required=False,
        widget=forms.CheckboxInput(attrs={'class': 'form-check-input'})
    )


class RegistrationForm(forms.ModelForm):
    """
    Self sign-up for students and staff. Staff accounts start unapproved.
    """
    SIGNUP_ROLES = [
        (Profile.Role.STUDENT, Profile.Role.STUDENT.label),
        (Profile.Role.ADVISOR, Profile.Role.ADVISOR.label),
        (Profile.Role.HOD, Profile.Role.HOD.label),
        (Profile.Role.WARDEN, Profile.Role.WARDEN.label),
    ]

    full_name = forms.CharField(
        label=_('Full name'),
        max_length=200,
        widget=forms.TextInput(attrs={'class': 'form-control'})
    )
    role = forms.ChoiceField(
        label=_('I am a'),
        choices=SIGNUP_ROLES,
        widget=forms.Select(attrs={'class': 'form-control'})
    )
    department = forms.ModelChoiceField(
        queryset=Department.objects.all(),
        required=False,
        widget=forms.Select(attrs={'class': 'form-control'})
    )
    student_id = forms.CharField(
        label=_('Registration number'),
        max_length=30,
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control'})
    )
    password1 = forms.CharField(
        label=_("Password"),
        widget=forms.PasswordInput(attrs={
            'class': 'form-control',
            'placeholder': _('Enter password')
        })
    )
    password2 = forms.CharField(
        label=_("Password confirmation"),
        widget=forms.PasswordInput(attrs={
            'class': 'form-control',
            'placeholder': _('Confirm password')
        }),
        help_text=_("Enter the same password as above, for verification.")
    )

    class Meta:
        model = User
        fields = ['email']
        widgets = {
            'email': forms.EmailInput(attrs={
                'class': 'form-control',
                'placeholder': _('user@example.com')
            }),
        }

    def clean_email(self):
        email = self.cleaned_data.get('email')
        if email:
            email = User.objects.normalize_email(email)
            if User.objects.filter(email__iexact=email).exists():
                raise ValidationError(
                    _("A user with this email address already exists.")
                )
        return email

    def clean_student_id(self):
        student_id = self.cleaned_data.get('student_id', '').strip()
        if student_id and Profile.objects.filter(student_id__iexact=student_id).exists():
            raise ValidationError(_("This registration number is already registered."))
        return student_id or None

    def clean_password2(self):
        password1 = self.cleaned_data.get("password1")
        password2 = self.cleaned_data.get("password2")

        if password1 and password2 and password1 != password2:
            raise ValidationError(
                _("The two password fields didn't match.")
            )

        if password1:
            try:
                validate_password(password1)
            except ValidationError as e:
                raise ValidationError(e.messages)

        return password2

    def clean(self):
        cleaned_data = super().clean()
        role = cleaned_data.get('role')

        if role == Profile.Role.STUDENT and not cleaned_data.get('student_id'):
            self.add_error('student_id', _('Students must give their registration number.'))
        if role in (Profile.Role.STUDENT, Profile.Role.ADVISOR, Profile.Role.HOD) and not cleaned_data.get('department'):
            self.add_error('department', _('Please choose your department.'))

        return cleaned_data

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password1"])

        if commit:
            user.save()
            role = self.cleaned_data['role']
            Profile.objects.create(
                user=user,
                full_name=self.cleaned_data['full_name'],
                role=role,
                department=self.cleaned_data.get('department'),
                student_id=self.cleaned_data.get('student_id') if role == Profile.Role.STUDENT else None,
                is_approved=False,
            )
        return user


class ProfileForm(forms.ModelForm):
    """
    Contact details a user may edit on their own profile.
    """
    class Meta:
        model = Profile
        fields = [
            'full_name', 'phone', 'year_of_study', 'guardian_name',
            'guardian_phone', 'local_address', 'permanent_address'
        ]
        widgets = {
            'full_name': forms.TextInput(attrs={'class': 'form-control'}),
            'phone': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': _('+919876543210')
            }),
            'year_of_study': forms.NumberInput(attrs={'class': 'form-control', 'min': '1', 'max': '6'}),
            'guardian_name': forms.TextInput(attrs={'class': 'form-control'}),
            'guardian_phone': forms.TextInput(attrs={'class': 'form-control'}),
            'local_address': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
            'permanent_address': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.instance.is_student:
            for field in ('year_of_study', 'guardian_name', 'guardian_phone'):
                self.fields.pop(field)


class ProfilePhotoForm(forms.Form):
    """
    Photo upload, checked for size and type before anything is stored.
    """
    photo = forms.ImageField(
        label=_('Profile photo'),
        widget=forms.ClearableFileInput(attrs={
            'class': 'form-control',
            'accept': 'image/jpeg,image/png'
        })
    )

    def clean_photo(self):
        photo = self.cleaned_data['photo']

        max_size = settings.PROFILE_PHOTO_MAX_SIZE
        if photo.size > max_size:
            raise ValidationError(
                _('Photo must be smaller than %(size)s.') % {'size': filesizeformat(max_size)}
            )

        content_type = getattr(photo, 'content_type', None)
        if content_type not in settings.PROFILE_PHOTO_CONTENT_TYPES:
            raise ValidationError(_('Please upload a JPEG or PNG image.'))

        return photo
