# main.py

# --- Standard library imports ---
import logging               # Root log handler for the engine modules
import os                    # Read environment variables (log level, token)
import threading             # Run the tray icon without blocking the UI
from pathlib import Path     # Build paths relative to this file

# --- Third-party / GUI imports ---
import tkinter as tk                     # Tkinter GUI for the agenda window + toasts
from PIL import Image, ImageDraw         # Build an in-memory tray icon image
import pystray                           # System tray icon + menu
from apscheduler.schedulers.background import BackgroundScheduler  # Scheduler for timed jobs

# --- Engine ---
from energycoach.agenda import Slot
from energycoach.channels import probe_channel, probe_cue
from energycoach.coach import Coach, build_context
from energycoach.pantry import Pantry
from energycoach.providers.google import GoogleCalendar
from energycoach.settings import config_path, load_config
from energycoach.sleep import format_duration, minutes_slept
from energycoach.store import JsonStore, default_store_path
from energycoach.timeutil import TZ_NAME, parse_hhmm

# ---------- Config ----------
HERE = Path(__file__).parent
CONFIG_PATH = config_path(HERE)
STATE_PATH = default_store_path(HERE)

logging.basicConfig(
    level=os.environ.get("ENERGYCOACH_LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("energycoach.app")

BG = "#0b1220"
CARD_BG = "#111827"
FG = "#e5e7eb"
MUTED = "#9ca3af"
ACCENT = "#059669"   # emerald-600
TICK_MS = 30_000


# Accent strip per reminder title; anything else (quotes, snoozes) uses ACCENT
TOAST_ACCENTS = {
    "Breakfast": "#f59e0b",
    "Lunch": "#22c55e",
    "Dinner": "#3b82f6",
    "Exercise": "#ef4444",
}
TOAST_GAP = 8


class ToastStack:
    """
    Sticky reminder cards stacked upward from the bottom-right corner.
    A card stays until one of its actions is pressed; the rest slide down.
    """

    def __init__(self, root: tk.Tk):
        self.root = root
        self.cards = []

    def push(self, title: str, body: str, actions):
        """``actions`` is a list of (label, callback); every action closes the card."""
        card = tk.Toplevel(self.root)
        card.overrideredirect(True)
        card.attributes("-topmost", True)
        card.configure(bg=BG, highlightthickness=1, highlightbackground="#334155")

        tk.Frame(card, bg=TOAST_ACCENTS.get(title, ACCENT), width=4).pack(side="left", fill="y")
        inner = tk.Frame(card, bg=BG)
        inner.pack(side="left", fill="both", expand=True, padx=10, pady=8)

        # Recipe notes run long: headline first, the rest behind "More"
        lines = body.splitlines() or [""]
        tk.Label(inner, text=title, fg="white", bg=BG,
                 font=("Segoe UI", 10, "bold")).pack(anchor="w")
        tk.Label(inner, text=lines[0], fg=FG, bg=BG, font=("Segoe UI", 9),
                 wraplength=300, justify="left").pack(anchor="w", pady=(2, 4))
        details = tk.Label(inner, text="\n".join(lines[1:]), fg=MUTED, bg=BG,
                           font=("Segoe UI", 8), wraplength=300, justify="left")

        row = tk.Frame(inner, bg=BG)
        row.pack(fill="x", pady=(4, 0))
        for label, callback in actions:
            tk.Button(row, text=label, relief="flat", bg="#1f2937", fg="white",
                      activebackground="#334155",
                      command=lambda cb=callback: self._close(card, cb)).pack(side="left", padx=(0, 6))
        if len(lines) > 1:
            toggle = tk.Button(row, text="More", relief="flat", bg=BG, fg=MUTED)
            toggle.config(command=lambda: self._toggle_details(details, toggle, row))
            toggle.pack(side="right")

        card.bind("<Escape>", lambda e: self._close(card, None))
        self.cards.append(card)
        self._restack()

    def _toggle_details(self, details, toggle, row):
        if details.winfo_ismapped():
            details.pack_forget()
            toggle.config(text="More")
        else:
            details.pack(anchor="w", before=row)
            toggle.config(text="Less")
        self._restack()

    def _close(self, card, callback):
        try:
            if callable(callback):
                callback()
        finally:
            if card in self.cards:
                self.cards.remove(card)
            card.destroy()
            self._restack()

    def _restack(self):
        # Newest card sits lowest; older ones move up
        bottom = self.root.winfo_screenheight() - 50
        right = self.root.winfo_screenwidth() - 20
        for card in reversed(self.cards):
            card.update_idletasks()
            w, h = card.winfo_reqwidth(), card.winfo_reqheight()
            bottom -= h
            card.geometry(f"{w}x{h}+{right - w}+{bottom}")
            bottom -= TOAST_GAP


class App:
    def __init__(self):
        """
        Composition root:
        - keyed store, settings (defaults → config.json → saved changes)
        - background job scheduler, notifier + cue probed once
        - Tk window with one card per slot
        """
        self.tk_root = tk.Tk()
        self.tk_root.title("EnergyCoach")
        self.tk_root.configure(bg=BG)
        self.icon = None
        self.toasts = ToastStack(self.tk_root)

        # Background job scheduler (runs alongside Tk mainloop).
        # IMPORTANT: pass the timezone NAME to avoid dateutil tzlocal bug paths.
        self.scheduler = BackgroundScheduler(timezone=TZ_NAME)
        self.scheduler.start()

        store = JsonStore(STATE_PATH)
        token = os.environ.get("ENERGYCOACH_GOOGLE_TOKEN")
        ctx = build_context(
            store,
            self.scheduler,
            notifier=probe_channel(in_app=self._show_toast_ui),
            cue=probe_cue(bell=self.tk_root.bell),
            # Fired jobs come from the APScheduler thread; marshal to Tk thread
            dispatch=lambda fn: self.tk_root.after(0, fn),
            tags=Pantry(store),
            calendar=GoogleCalendar(token) if token else None,
            settings=load_config(CONFIG_PATH),
        )
        self.coach = Coach(ctx)
        self._day = None
        self._countdowns = {}

        self._build_window()

    # ---------- UI ----------
    def _build_window(self):
        header = tk.Frame(self.tk_root, bg=BG)
        header.pack(fill="x", padx=12, pady=(12, 4))
        tk.Label(header, text="EnergyCoach", fg="white", bg=BG,
                 font=("Segoe UI", 14, "bold")).pack(side="left")
        tk.Button(header, text="Check In", relief="flat", bg=ACCENT, fg="white",
                  command=self.check_in).pack(side="right")

        self.quote_lbl = tk.Label(self.tk_root, fg=FG, bg=BG, font=("Segoe UI", 10, "italic"),
                                  wraplength=380, justify="center")
        self.quote_lbl.pack(fill="x", padx=12, pady=4)

        self.cards = tk.Frame(self.tk_root, bg=BG)
        self.cards.pack(fill="both", expand=True, padx=12)

        footer = tk.Frame(self.tk_root, bg=BG)
        footer.pack(fill="x", padx=12, pady=(4, 12))
        tk.Button(footer, text="Today's events", relief="flat", bg="#1f2937", fg="white",
                  command=self.show_events).pack(side="left")
        tk.Button(footer, text="Copy shopping list", relief="flat", bg="#1f2937", fg="white",
                  command=self.copy_shopping_list).pack(side="left", padx=6)
        self.sleep_lbl = tk.Label(footer, fg=MUTED, bg=BG, font=("Segoe UI", 8))
        self.sleep_lbl.pack(side="right")

    def render_cards(self):
        """Rebuild one card per populated slot, in time order."""
        for child in self.cards.winfo_children():
            child.destroy()
        self._countdowns = {}

        agenda = self.coach.agenda
        self._day = agenda.day_key
        q = agenda.quote
        self.quote_lbl.config(text=f"“{q.text}” — {q.author}" if q else "")
        self.sleep_lbl.config(text=f"Slept: {format_duration(minutes_slept(self.coach.sleep))}")

        cards = self.coach.cards()
        if not cards:
            tk.Label(self.cards, text="Check in to plan today.", fg=MUTED, bg=BG).pack(pady=20)
            return
        for slot, hhmm, countdown, note in cards:
            self._render_card(slot, hhmm, countdown, note)

    def _render_card(self, slot: Slot, hhmm: str, countdown: str, note: str):
        card = tk.Frame(self.cards, bg=CARD_BG, highlightthickness=1, highlightbackground="#1f2937")
        card.pack(fill="x", pady=4)

        row = tk.Frame(card, bg=CARD_BG)
        row.pack(fill="x", padx=8, pady=(6, 2))
        tk.Label(row, text=slot.label, fg="white", bg=CARD_BG,
                 font=("Segoe UI", 11, "bold")).pack(side="left")

        # Time entry: Return applies the edit (breakfast/lunch shift later meals)
        entry = tk.Entry(row, width=6, bg="#1f2937", fg="white", insertbackground="white")
        entry.insert(0, hhmm)
        entry.bind("<Return>", lambda e, s=slot, w=entry: self.edit_time(s, w.get()))
        entry.pack(side="left", padx=8)

        cd = tk.Label(row, text=f"({countdown})", fg=MUTED, bg=CARD_BG)
        cd.pack(side="left")
        self._countdowns[slot] = cd

        label = "Plan" if slot is Slot.EXERCISE else "Suggest"
        tk.Button(row, text=label, relief="flat", bg="#1f2937", fg="white",
                  command=lambda s=slot: self.suggest(s)).pack(side="right")

        text = tk.Text(card, height=4, wrap="word", bg="#0f172a", fg=FG,
                       insertbackground="white", relief="flat", font=("Segoe UI", 9))
        text.insert("1.0", note)
        text.bind("<FocusOut>", lambda e, s=slot, w=text: self.coach.edit_note(s, w.get("1.0", "end-1c")))
        text.pack(fill="x", padx=8, pady=(2, 8))

    def _tick_ui(self):
        """
        Every 30 seconds:
        - run the rollover check (rebuild everything on a new day)
        - refresh the countdown labels
        """
        agenda = self.coach.agenda
        if agenda.day_key != self._day:
            self.render_cards()
        else:
            for slot, _hhmm, countdown, _note in self.coach.cards():
                lbl = self._countdowns.get(slot)
                if lbl is not None:
                    lbl.config(text=f"({countdown})")
        self.tk_root.after(TICK_MS, self._tick_ui)

    # ---------- Actions ----------
    def check_in(self, _=None):
        self.coach.check_in()
        self.render_cards()

    def edit_time(self, slot: Slot, hhmm: str):
        try:
            parse_hhmm(hhmm)
        except ValueError as e:
            logger.warning("Ignoring time edit: %s", e)
            return
        self.coach.edit_time(slot, hhmm)
        self.render_cards()

    def suggest(self, slot: Slot):
        self.coach.suggest(slot)
        self.render_cards()

    def show_events(self):
        win = tk.Toplevel(self.tk_root)
        win.title("Today's Events")
        win.configure(bg=BG)
        events = self.coach.refresh_events()
        if not events:
            tk.Label(win, text="Connect & refresh to load today's events.", fg=MUTED, bg=BG).pack(padx=12, pady=12)
        for ev in events:
            when = "all day" if ev.all_day else ev.start.strftime("%H:%M")
            tk.Label(win, text=f"{when}  {ev.summary}", fg=FG, bg=BG, anchor="w").pack(fill="x", padx=12, pady=2)

    def copy_shopping_list(self):
        self.tk_root.clipboard_clear()
        self.tk_root.clipboard_append(self.coach.ctx.tags.shopping_list_text())

    # ---------- Notifications ----------
    def _show_toast_ui(self, title: str, body: str):
        """In-app channel: a sticky card with Snooze 5 min and Dismiss."""
        def on_snooze():
            try:
                self.coach.ctx.scheduler.snooze(title, body)
            except Exception as e:
                logger.warning("Snooze scheduling failed: %s", e)

        self.toasts.push(title, body, [("Snooze 5 min", on_snooze), ("Dismiss", None)])

    def _on_midnight(self):
        """Roll the agenda over and queue tomorrow's check."""
        self.render_cards()
        self.coach.ctx.scheduler.schedule_rollover(self._on_midnight)

    # ---------- Tray ----------
    def make_tray_icon(self):
        """
        Build a simple circular green tray icon and menu.
        Run the tray icon on a daemon thread so it doesn't block Tk mainloop.
        """
        img = Image.new("RGBA", (64, 64), (0, 0, 0, 0))
        d = ImageDraw.Draw(img)
        d.ellipse((8, 8, 56, 56), fill=(5, 150, 105, 255))

        # Menu callbacks arrive on the tray thread; hand them to Tk
        menu = pystray.Menu(
            pystray.MenuItem("Check in", lambda: self.tk_root.after(0, self.check_in)),
            pystray.MenuItem("Enable notifications",
                             lambda: self.tk_root.after(0, self.request_permission)),
            pystray.MenuItem("Quit", lambda: self.tk_root.after(0, self.quit)),
        )
        self.icon = pystray.Icon("EnergyCoach", img, "EnergyCoach", menu)
        threading.Thread(target=self.icon.run, daemon=True).start()

    def request_permission(self):
        state = self.coach.ctx.scheduler.notifier.request_permission()
        logger.info("Notification permission: %s", state)

    # ---------- Control ----------
    def quit(self, _=None):
        """
        Cleanly stop tray + scheduler and close the Tk window.
        """
        try:
            if self.icon:
                self.icon.stop()
        except Exception as e:
            logger.debug("Tray stop failed: %s", e)
        try:
            self.scheduler.shutdown(wait=False)
        except Exception as e:
            logger.debug("Scheduler shutdown failed: %s", e)
        self.tk_root.destroy()

    # ---------- Boot ----------
    def run(self):
        """
        App entrypoint:
        - Restore today's agenda and re-arm reminders still ahead
        - Start the tray icon and the midnight rollover job
        - Enter Tk main loop
        """
        self.coach.resume()
        self.render_cards()
        self.coach.ctx.scheduler.schedule_rollover(self._on_midnight)
        self.make_tray_icon()
        self.tk_root.after(TICK_MS, self._tick_ui)
        self.tk_root.protocol("WM_DELETE_WINDOW", self.quit)
        self.tk_root.mainloop()


# Only run the app when this file is executed directly (not on import)
if __name__ == "__main__":
    logger.info("Using timezone: %s", TZ_NAME)
    App().run()
