from django.contrib import admin

from .models import DailyPuzzle, LexiconEntry, StoredSession, PuzzleResult


@admin.register(DailyPuzzle)
class DailyPuzzleAdmin(admin.ModelAdmin):
    list_display = ("puzzle_date", "domain", "answer", "created_at")
    list_filter = ("domain",)
    search_fields = ("answer",)
    date_hierarchy = "puzzle_date"
    ordering = ("-puzzle_date", "domain")


@admin.register(LexiconEntry)
class LexiconEntryAdmin(admin.ModelAdmin):
    list_display = ("name", "domain", "normalized", "latitude", "longitude")
    list_filter = ("domain",)
    search_fields = ("name", "normalized")
    ordering = ("domain", "normalized")


@admin.register(StoredSession)
class StoredSessionAdmin(admin.ModelAdmin):
    list_display = ("owner", "key", "updated_at")
    search_fields = ("owner", "key")
    readonly_fields = ("payload", "created_at", "updated_at")


@admin.register(PuzzleResult)
class PuzzleResultAdmin(admin.ModelAdmin):
    list_display = ("domain", "success", "attempts", "created_at")
    list_filter = ("domain", "success")
    readonly_fields = ("created_at",)
