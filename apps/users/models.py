import uuid
from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.utils.translation import gettext_lazy as _
from django.core.validators import RegexValidator, MinValueValidator, MaxValueValidator
from apps.core.models import CoreBaseModel


class UserManager(BaseUserManager):
    """
    Custom user manager for email-based authentication.
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and return a regular user with an email and password.
        """
        if not email:
            raise ValueError(_('The Email field must be set'))

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create and return a superuser with admin permissions.
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True.'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True.'))

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Custom User model with email as primary identifier.
    """
    id = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        primary_key=True,
    )
    username = None
    email = models.EmailField(
        _('email address'),
        unique=True,
        db_index=True,
        help_text=_('Primary email address for communication')
    )
    first_name = models.CharField(_('first name'), max_length=150, blank=True)
    last_name = models.CharField(_('last name'), max_length=150, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = _('User')
        verbose_name_plural = _('Users')
        ordering = ['-date_joined']

    def __str__(self):
        return self.email

    @property
    def full_name(self):
        """Return the full name of the user."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_name(self):
        return self.full_name or self.email


class Department(CoreBaseModel):
    """
    Academic department that scopes advisor and HOD dashboards.
    """
    name = models.CharField(_('department name'), max_length=150, unique=True)
    code = models.CharField(_('department code'), max_length=20, unique=True)

    class Meta:
        verbose_name = _('Department')
        verbose_name_plural = _('Departments')
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.code})"


def profile_photo_path(instance, filename):
    """Store one photo per user, named after the user id."""
    extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else 'jpg'
    return f"profile-photos/{instance.user_id}.{extension}"


class Profile(CoreBaseModel):
    """
    Hostel profile for students and staff.
    """
    class Role(models.TextChoices):
        STUDENT = 'student', _('Student')
        ADVISOR = 'advisor', _('Advisor')
        HOD = 'hod', _('Head of Department')
        WARDEN = 'warden', _('Warden')
        PRINCIPAL = 'principal', _('Principal')
        ADMIN = 'admin', _('Administrator')

    class KeySlot(models.TextChoices):
        A = 'A', _('Key A')
        B = 'B', _('Key B')

    STAFF_ROLES = [Role.ADVISOR, Role.HOD, Role.WARDEN, Role.PRINCIPAL, Role.ADMIN]
    REVIEWER_ROLES = [Role.ADVISOR, Role.HOD, Role.WARDEN]

    phone_regex = RegexValidator(
        regex=r'^\+?1?\d{9,15}$',
        message=_("Phone number must be entered in the format: '+999999999'. Up to 15 digits allowed.")
    )

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='profile',
        verbose_name=_('user')
    )
    full_name = models.CharField(_('full name'), max_length=200)
    role = models.CharField(
        _('role'),
        max_length=20,
        choices=Role.choices,
        default=Role.STUDENT,
        db_index=True
    )
    department = models.ForeignKey(
        Department,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='profiles',
        verbose_name=_('department')
    )
    room = models.ForeignKey(
        'hostels.Room',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='residents',
        verbose_name=_('room')
    )

    # Student details
    student_id = models.CharField(
        _('registration number'),
        max_length=30,
        unique=True,
        null=True,
        blank=True
    )
    year_of_study = models.PositiveSmallIntegerField(
        _('year of study'),
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(6)]
    )

    # Contact
    phone = models.CharField(_('phone'), validators=[phone_regex], max_length=17, blank=True)
    guardian_name = models.CharField(_('guardian name'), max_length=200, blank=True)
    guardian_phone = models.CharField(_('guardian phone'), validators=[phone_regex], max_length=17, blank=True)
    local_address = models.TextField(_('local address'), blank=True)
    permanent_address = models.TextField(_('permanent address'), blank=True)

    photo = models.ImageField(
        _('photo'),
        upload_to=profile_photo_path,
        null=True,
        blank=True
    )

    # Access flags
    is_approved = models.BooleanField(
        _('approved'),
        default=False,
        help_text=_('Staff accounts can review requests only once approved')
    )
    is_blocked = models.BooleanField(
        _('blocked'),
        default=False,
        help_text=_('Blocked students cannot submit outing requests')
    )

    # Room key currently held by this resident
    key_number = models.CharField(_('key number'), max_length=1, choices=KeySlot.choices, blank=True)
    key_issued_at = models.DateTimeField(_('key issued at'), null=True, blank=True)

    class Meta:
        verbose_name = _('Profile')
        verbose_name_plural = _('Profiles')
        ordering = ['full_name']
        indexes = [
            models.Index(fields=['role', 'department']),
            models.Index(fields=['room']),
        ]

    def __str__(self):
        if self.student_id:
            return f"{self.full_name} ({self.student_id})"
        return self.full_name

    @property
    def is_student(self):
        return self.role == self.Role.STUDENT

    @property
    def is_staff_member(self):
        return self.role in self.STAFF_ROLES

    @property
    def holds_key(self):
        return bool(self.key_number)


# Signal handlers for automatic updates
from django.db.models.signals import post_save, post_delete, pre_save
from django.dispatch import receiver


@receiver(pre_save, sender=Profile)
def remember_previous_room(sender, instance, **kwargs):
    """Keep the old room id so both rooms can be recounted after a move."""
    instance._previous_room_id = None
    if instance.pk:
        instance._previous_room_id = (
            Profile.objects.filter(pk=instance.pk).values_list('room_id', flat=True).first()
        )


@receiver(post_save, sender=Profile)
@receiver(post_delete, sender=Profile)
def update_room_occupancy(sender, instance, **kwargs):
    """
    Recount occupancy for the rooms a profile moved between.
    """
    from apps.hostels.models import Room

    room_ids = {instance.room_id, getattr(instance, '_previous_room_id', None)}
    for room in Room.objects.filter(pk__in=[pk for pk in room_ids if pk]):
        room.update_occupancy()
