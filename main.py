import os
import tkinter as tk
from tkinter import filedialog, messagebox

import pywinstyles

from config import (find_jar_name_from_stacktrace, find_map_file_by_jar,
                    load_config, save_config)
from mapper import ProguardMapper

# --- DARK THEME (Dracula-like) ---
DRACULA_BG = "#282a36"
DRACULA_FG = "#f8f8f2"
DRACULA_ENTRY_BG = "#44475a"
DRACULA_ENTRY_FG = "#f8f8f2"
DRACULA_YELLOW = "#fffb96"
DRACULA_BTN_BG = "#6272a4"
DRACULA_BTN_FG = "#f8f8f2"
DRACULA_LABEL = "#bd93f9"


def deobfuscate_stacktrace_highlight(text, mapper):
    """
    Like ProguardMapper.remap_stacktrace, but also returns the Text widget
    index ranges of the rewritten lines for highlighting.
    """
    output, ranges = mapper.remap_stacktrace_with_ranges(text)
    return output, [(f"{line}.0", f"{line}.{length}") for line, length in ranges]


class DeobfuscatorApp:
    """Main window: paste a stacktrace, get it back with original names."""

    def __init__(self, root):
        self.root = root
        self.config = load_config()
        self.mapper = None
        self.current_view = "input"
        self.last_input = ""
        self.last_output = ""
        self.last_highlights = []
        self.scroll = {"input": 0.0, "output": 0.0}
        self.init_ui()

    def init_ui(self):
        root = self.root
        root.title("Stacktrace Deobfuscator")
        pywinstyles.apply_style(root, "acrylic")

        # Set Windows title bar to dark mode (Windows 10+ only)
        try:
            import ctypes
            hwnd = ctypes.windll.user32.GetParent(root.winfo_id())
            for attr in (20, 19):
                ctypes.windll.dwmapi.DwmSetWindowAttribute(hwnd, attr, ctypes.byref(ctypes.c_int(1)), ctypes.sizeof(ctypes.c_int(1)))
            # 2 = Mica
            ctypes.windll.dwmapi.DwmSetWindowAttribute(hwnd, 38, ctypes.byref(ctypes.c_int(2)), ctypes.sizeof(ctypes.c_int(1)))
        except (AttributeError, OSError):
            pass

        root.configure(bg=DRACULA_BG)

        style_args = {"bg": DRACULA_BG, "fg": DRACULA_LABEL, "font": ("Consolas", 11, "bold")}
        button_args = {"bg": DRACULA_BTN_BG, "fg": DRACULA_BTN_FG,
                       "activebackground": DRACULA_LABEL, "activeforeground": DRACULA_BG}

        self.map_label = tk.Label(root, text="No mapping file loaded", **style_args)
        self.map_label.pack(pady=(10, 0))
        tk.Button(root, text="Select Mapping File", command=self.select_map_file,
                  **button_args).pack(pady=(5, 10))

        self.mapping_dir_label = tk.Label(
            root, text=f"Mapping dir: {self.config.get('mapping_dir') or 'None'}",
            bg=DRACULA_BG, fg=DRACULA_LABEL, font=("Consolas", 10, "bold"))
        self.mapping_dir_label.pack()
        tk.Button(root, text="Select Mapping Folder", command=self.select_mapping_folder,
                  **button_args).pack(pady=(0, 10))

        tk.Label(root, text="Stacktrace / Deobfuscated", bg=DRACULA_BG, fg=DRACULA_FG,
                 font=("Consolas", 10, "bold")).pack()

        self.textbox = tk.Text(
            root,
            height=30,
            bg=DRACULA_ENTRY_BG,
            fg=DRACULA_ENTRY_FG,
            insertbackground=DRACULA_FG,
            selectbackground=DRACULA_YELLOW,
            selectforeground="#222222",
            font=("Consolas", 11)
        )
        self.textbox.pack(fill="both", expand=True, padx=10, pady=(0, 10))
        self.textbox.tag_configure("highlight", background=DRACULA_YELLOW, foreground="#222222",
                                   font=("Consolas", 11, "bold"))
        self.textbox.bind("<KeyRelease>", lambda event: self.adjust_window_width())
        self.textbox.bind("<<Paste>>", self.on_paste)
        self.textbox.bind("<Control-v>", self.on_paste)

        self.switch_btn = tk.Button(root, text="Show Deobfuscated", command=self.switch_view,
                                    **button_args)
        self.switch_btn.pack(pady=(0, 10))

        self.show_input()

    def load_mapping(self, path, auto=False):
        try:
            self.mapper = ProguardMapper.open(path)
        except (OSError, UnicodeDecodeError) as e:
            messagebox.showerror("Error loading mapping", str(e))
            return False
        self.config["map_path"] = path
        save_config(self.config)
        suffix = " (auto)" if auto else ""
        self.map_label.config(text=f"Loaded: {os.path.basename(path)}{suffix}")
        return True

    def select_map_file(self):
        path = filedialog.askopenfilename(
            filetypes=[("ProGuard mapping", "*.map *.txt"), ("All files", "*")])
        if path:
            self.load_mapping(path)

    def select_mapping_folder(self):
        folder = filedialog.askdirectory()
        if folder:
            self.config["mapping_dir"] = folder
            save_config(self.config)
            self.mapping_dir_label.config(text=f"Mapping dir: {folder}")

    def try_autoload_map_from_stacktrace(self):
        """
        Find and load the mapping of the jar named in the pasted stacktrace.
        """
        jar_name = find_jar_name_from_stacktrace(self.textbox.get("1.0", tk.END))
        found_map = find_map_file_by_jar(jar_name, self.config.get("mapping_dir"))
        if found_map and self.load_mapping(found_map, auto=True):
            print(f"Auto-loaded map: {found_map} for jar: {jar_name}")

    def on_paste(self, event=None):
        # Wait for paste to complete, then try to auto-load map and deobfuscate
        def after_paste():
            self.try_autoload_map_from_stacktrace()
            if self.deobfuscate():
                self.show_output()
        self.root.after(50, after_paste)
        return None

    def deobfuscate(self):
        if self.mapper is None:
            messagebox.showwarning("No mapping", "Select a mapping file first.")
            return False
        self.last_input = self.textbox.get("1.0", "end-1c")
        self.last_output, self.last_highlights = deobfuscate_stacktrace_highlight(
            self.last_input, self.mapper)
        self.adjust_window_width()
        return True

    def show_text(self, view, text):
        self.current_view = view
        self.textbox.delete("1.0", tk.END)
        self.textbox.insert("1.0", text)
        self.textbox.tag_remove("highlight", "1.0", tk.END)
        self.textbox.yview_moveto(self.scroll[view])

    def show_input(self):
        self.show_text("input", self.last_input)
        self.switch_btn.config(text="Show Deobfuscated")

    def show_output(self):
        self.show_text("output", self.last_output)
        for start, end in self.last_highlights:
            self.textbox.tag_add("highlight", start, end)
        self.switch_btn.config(text="Show Original")

    def switch_view(self):
        self.scroll[self.current_view] = self.textbox.yview()[0]
        if self.current_view == "input":
            if self.deobfuscate():
                self.show_output()
        else:
            self.show_input()

    def adjust_window_width(self):
        """
        Adjust the window width based on the longest line in the current textbox.
        """
        lines = self.textbox.get("1.0", tk.END).splitlines()
        max_len = max((len(line) for line in lines), default=80)
        width_px = int(max(800, min(1800, max_len * 8.5 + 60)))
        self.root.geometry(f"{width_px}x600")

    def autoload_last_mapping(self):
        map_path = self.config.get("map_path", "")
        if map_path and os.path.exists(map_path):
            self.load_mapping(map_path)


def main():
    root = tk.Tk()
    app = DeobfuscatorApp(root)
    app.autoload_last_mapping()
    root.mainloop()


if __name__ == "__main__":
    main()
