from django.db import models


class Attendance(models.Model):
    """One student's attendance for one day"""
    STATUS_CHOICES = [
        ('present', 'Present'),
        ('absent', 'Absent'),
        ('late', 'Late'),
        ('excused', 'Excused'),
        ('not_marked', 'Not Marked'),
    ]

    student_id = models.CharField(max_length=50, db_index=True)
    date = models.DateField(db_index=True)
    time = models.CharField(max_length=20, blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES)
    teacher_id = models.CharField(max_length=50)
    teacher_name = models.CharField(max_length=255)
    remarks = models.TextField(blank=True, null=True)
    notification_sent = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.student_id} {self.date}: {self.status}"

    class Meta:
        db_table = 'attendance'
        ordering = ['-date', 'time']
        unique_together = [['student_id', 'date']]
