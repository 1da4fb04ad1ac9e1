import os
import sys
import threading
import subprocess
import tkinter as tk
from tkinter import filedialog, messagebox, scrolledtext

from mockbatch.config import Config

DESIGN_TYPES = [("Images", "*.png *.jpg *.jpeg *.psd"), ("All files", "*.*")]
MOCKUP_TYPES = [("Mock-ups", "*.psd *.psb *.json *.png *.jpg *.jpeg *.tif *.tiff"), ("All files", "*.*")]


def trim_command(input_dir: str, output_dir: str, alpha_threshold: int = 0):
    return [sys.executable, "-m", "mockbatch.main", "trim", input_dir, output_dir,
            "--alpha-threshold", str(alpha_threshold)]


def mockups_command(designs, mockups, out_dir: str, layer: str, native_png: bool = False):
    cmd = [sys.executable, "-m", "mockbatch.main", "mockups",
           "--designs", *designs, "--mockups", *mockups, "--out", out_dir, "--layer", layer]
    if native_png:
        cmd.append("--native-png")
    return cmd


class BatchGUI(tk.Tk):
    def __init__(self):
        super().__init__()
        self.title("Mock-up Batch")
        self.geometry("920x600")
        self.proc = None

        # Options
        opts = tk.Frame(self, padx=10, pady=10)
        opts.pack(fill="x")
        tk.Label(opts, text="Placeholder layer:").pack(side="left")
        self.layer_var = tk.StringVar(value=Config.TARGET_LAYER)
        tk.Entry(opts, textvariable=self.layer_var, width=24).pack(side="left", padx=6)
        self.native_var = tk.BooleanVar(value=False)
        tk.Checkbutton(opts, text="Native PNG (no web optimisation)", variable=self.native_var).pack(side="left")

        # Jobs
        jobs = tk.LabelFrame(self, text="Jobs", padx=10, pady=10)
        jobs.pack(fill="x", padx=10, pady=6)
        self.btn_trim = tk.Button(jobs, text="Trim transparent folder…", width=26, command=self.run_trim)
        self.btn_mockups = tk.Button(jobs, text="Export mock-ups…", width=26, command=self.run_mockups)
        self.btn_stop = tk.Button(jobs, text="Stop", width=10, command=self.stop_proc, state="disabled")
        self.btn_trim.pack(side="left", padx=4)
        self.btn_mockups.pack(side="left", padx=4)
        self.btn_stop.pack(side="left", padx=12)

        # Log area
        self.log = scrolledtext.ScrolledText(self, height=22, wrap="word")
        self.log.pack(fill="both", expand=True, padx=10, pady=5)
        self.write_log("Ready.\n")

    def write_log(self, text):
        self.log.insert("end", text)
        self.log.see("end")
        self.log.update_idletasks()

    def set_buttons_running(self, running: bool):
        state_main = "disabled" if running else "normal"
        for btn in (self.btn_trim, self.btn_mockups):
            btn.config(state=state_main)
        self.btn_stop.config(state="normal" if running else "disabled")

    def _busy(self) -> bool:
        if self.proc is not None:
            messagebox.showwarning("Already Running", "A batch is already in progress.")
            return True
        return False

    # --- trim ---
    def run_trim(self):
        if self._busy():
            return
        input_dir = filedialog.askdirectory(title="Choose the input folder with images")
        if not input_dir:
            messagebox.showinfo("Cancelled", "No input folder selected")
            return
        output_dir = filedialog.askdirectory(title="Choose an output folder for the results")
        if not output_dir:
            messagebox.showinfo("Cancelled", "No output folder selected")
            return
        self._spawn(trim_command(input_dir, output_dir))

    # --- mock-ups ---
    def run_mockups(self):
        if self._busy():
            return
        designs = filedialog.askopenfilenames(title="Select design PNG/JPG/PSD", filetypes=DESIGN_TYPES)
        if not designs:
            messagebox.showinfo("Cancelled", "No designs selected.")
            return
        mockups = filedialog.askopenfilenames(title="Select mock-ups", filetypes=MOCKUP_TYPES)
        if not mockups:
            messagebox.showinfo("Cancelled", "No mock-ups selected.")
            return
        out_dir = filedialog.askdirectory(title="Choose output folder")
        if not out_dir:
            messagebox.showinfo("Cancelled", "No output folder selected.")
            return
        layer = self.layer_var.get().strip() or Config.TARGET_LAYER
        self._spawn(mockups_command(list(designs), list(mockups), out_dir, layer, self.native_var.get()))

    def _spawn(self, cmd):
        self.write_log(f"\n>>> Running: {' '.join(cmd)}\n")

        def target():
            try:
                self.proc = subprocess.Popen(
                    cmd,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    bufsize=1,
                    env={**os.environ, "PYTHONUNBUFFERED": "1"},
                )
                self.set_buttons_running(True)
                for line in self.proc.stdout:
                    self.write_log(line)
                code = self.proc.wait()
                self.write_log(f"\n>>> Process exited with code {code}\n")
            except Exception as e:
                self.write_log(f"\n[ERROR] {e}\n")
            finally:
                self.proc = None
                self.set_buttons_running(False)

        threading.Thread(target=target, daemon=True).start()

    def stop_proc(self):
        if self.proc and self.proc.poll() is None:
            self.write_log(">>> Stopping process…\n")
            try:
                self.proc.terminate()
            except Exception as e:
                self.write_log(f"[ERROR] terminate() failed: {e}\n")
        else:
            self.write_log(">>> No running process.\n")


def main():
    app = BatchGUI()
    app.mainloop()


if __name__ == "__main__":
    main()
